import pytest
from httpx import AsyncClient
from uuid import uuid4


@pytest.mark.asyncio
async def test_otp_policy_round_trip(client: AsyncClient, auth_headers, sale):
    response = await client.get("/otp-policy", headers=auth_headers("admin"))
    assert response.status_code == 200
    assert response.json()["otp_length"] == 6
    assert "smtp_password" not in response.json()

    response = await client.put(
        "/otp-policy",
        json={
            "otp_length": 4,
            "otp_expiration_seconds": 120,
            "max_attempts": 5,
            "default_channel": "whatsapp",
            "allowed_channels": ["email", "whatsapp"],
            "whatsapp_otp_enabled": True,
            "smtp_relay_url": "https://relay.test/send",
            "smtp_password": "s3cret",
        },
        headers=auth_headers("admin"),
    )
    assert response.status_code == 200
    assert response.json()["smtp_password_set"] is True

    # the signer page sees the new policy
    response = await client.post(
        "/signature-otp", json={"action": "get_policy", "sale_id": str(sale.id)}
    )
    assert response.json() == {
        "require_otp": True,
        "allowed_channels": ["email", "whatsapp"],
        "default_channel": "whatsapp",
        "whatsapp_enabled": True,
    }


@pytest.mark.asyncio
async def test_invalid_otp_policy(client: AsyncClient, auth_headers):
    response = await client.put(
        "/otp-policy",
        json={"otp_length": 7, "allowed_channels": ["email"], "default_channel": "whatsapp"},
        headers=auth_headers("admin"),
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_OTP_POLICY"
    assert len(response.json()["problems"]) == 2


@pytest.mark.asyncio
async def test_whatsapp_otp_via_meta_with_fallback(client: AsyncClient, auth_headers, sale, outbound):
    await client.put(
        "/otp-policy",
        json={
            "default_channel": "whatsapp",
            "allowed_channels": ["email", "whatsapp"],
            "whatsapp_otp_enabled": True,
            "smtp_relay_url": "https://relay.test/send",
        },
        headers=auth_headers("admin"),
    )
    response = await client.put(
        "/messaging-settings",
        json={"whatsapp_provider": "meta", "whatsapp_api_key": "EAAGtoken1234", "whatsapp_phone_id": "777"},
        headers=auth_headers("admin"),
    )
    assert response.status_code == 200
    assert response.json()["whatsapp_api_key"] == "****1234"

    response = await client.post(
        "/signature-otp",
        json={
            "action": "send",
            "signature_link_id": str(uuid4()),
            "sale_id": str(sale.id),
            "recipient_phone": "+595981123456",
            "recipient_email": "juan.perez@mail.com",
        },
    )

    assert response.status_code == 200
    assert response.json()["channel_used"] == "whatsapp"
    assert response.json()["provider_used"] == "meta"
    assert response.json()["destination_masked"] == "*********3456"
    assert outbound[-1]["url"].endswith("/777/messages")

    # manual mode cannot send, so e-mail takes over
    await client.put(
        "/messaging-settings", json={"whatsapp_provider": "wame"}, headers=auth_headers("admin")
    )
    response = await client.post(
        "/signature-otp",
        json={
            "action": "send",
            "signature_link_id": str(uuid4()),
            "sale_id": str(sale.id),
            "recipient_phone": "+595981123456",
            "recipient_email": "juan.perez@mail.com",
        },
    )
    data = response.json()
    assert data["attempted_channel"] == "whatsapp"
    assert data["channel_used"] == "email"
    assert data["fallback_used"] is True
    assert "wa.me" in data["fallback_reason"]


@pytest.mark.asyncio
async def test_messaging_settings_admin_only(client: AsyncClient, auth_headers):
    response = await client.get("/messaging-settings", headers=auth_headers("vendedor"))

    assert response.status_code == 403
