import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_send_and_list_notifications(client: AsyncClient, auth_headers, sale, outbound):
    response = await client.post(
        "/notifications",
        json={
            "sale_id": str(sale.id),
            "template_name": "reminder",
            "template_data": {"clientName": "Juan", "signatureUrl": "https://firma/abc"},
            "channel": "whatsapp",
            "recipient_email": "juan.perez@mail.com",
            "recipient_phone": "+595981123456",
        },
        headers=auth_headers("gestor"),
    )

    # no messaging settings: WhatsApp is not configured, e-mail delivers
    assert response.status_code == 200
    data = response.json()
    assert data["sent"] is True
    assert data["channel_used"] == "email"
    assert data["fallback_used"] is True
    assert "Juan" in outbound[-1]["body"]["text"]
    assert "Salud Total SA" in outbound[-1]["body"]["text"]

    response = await client.get(f"/notifications?sale_id={sale.id}", headers=auth_headers("gestor"))
    messages = response.json()["messages"]
    assert len(messages) == 1
    assert messages[0]["message_type"] == "reminder"
    assert messages[0]["status"] == "sent"
    assert messages[0]["destination"] == "juan.perez@mail.com"


@pytest.mark.asyncio
async def test_notification_unknown_sale(client: AsyncClient, auth_headers, company):
    response = await client.post(
        "/notifications",
        json={
            "sale_id": "00000000-0000-0000-0000-000000000000",
            "channel": "email",
            "recipient_email": "juan.perez@mail.com",
        },
        headers=auth_headers("admin"),
    )

    assert response.status_code == 404
