"""
Unit tests for notification use cases
"""

import httpx
import pytest
from unittest.mock import AsyncMock
from uuid import uuid4

from src.app.use_cases.notifications import ListNotificationsUseCase, SendNotificationUseCase
from src.app.use_cases.notifications.dtos import SendNotificationCommand
from src.domain.entities import (
    Company,
    CompanyMessagingSettings,
    NotificationMessage,
    NotificationStatus,
    Sale,
    WhatsAppProvider,
)


@pytest.fixture
def http_client():
    def handler(request: httpx.Request):
        return httpx.Response(200, json={"id": "gw-1"})

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def notification_uow(mock_uow):
    mock_uow.sales.get_for_company = AsyncMock(return_value=Sale(id=uuid4(), company_id=uuid4()))
    mock_uow.otp_policies.get_by_company_id = AsyncMock(return_value=None)
    mock_uow.messaging_settings.get_by_company_id = AsyncMock(
        return_value=CompanyMessagingSettings(
            company_id=uuid4(),
            whatsapp_provider=WhatsAppProvider.gateway,
            gateway_url="https://gw.test",
        )
    )
    mock_uow.companies.get_by_id = AsyncMock(return_value=Company(id=uuid4(), name="Salud SA"))
    mock_uow.notifications.create = AsyncMock(side_effect=lambda m: m)
    return mock_uow


def make_command(**overrides):
    fields = dict(
        company_id=uuid4(),
        user_id=uuid4(),
        sale_id=uuid4(),
        template_name="signature_link",
        template_data={"clientName": "Ana", "signatureUrl": "https://firma/x", "companyName": "Salud"},
        channel="whatsapp",
        recipient_phone="+595981123456",
    )
    fields.update(overrides)
    return SendNotificationCommand(**fields)


@pytest.mark.asyncio
async def test_send_notification_whatsapp(notification_uow, http_client):
    result = await SendNotificationUseCase(notification_uow, http_client).execute(make_command())

    assert result.is_ok()
    assert result.value.sent is True
    assert result.value.channel_used == "whatsapp"
    assert result.value.provider_used == "gateway"
    assert result.value.message_id == "gw-1"

    message = notification_uow.notifications.create.call_args[0][0]
    assert message.status == NotificationStatus.sent
    assert message.message_type == "signature_link"
    assert "Ana" in message.message_body
    assert message.destination == "+595981123456"
    assert notification_uow.commit.await_count == 2


@pytest.mark.asyncio
async def test_send_notification_failure_is_logged(notification_uow, http_client):
    notification_uow.messaging_settings.get_by_company_id = AsyncMock(return_value=None)

    # no WhatsApp provider and no e-mail to fall back to
    result = await SendNotificationUseCase(notification_uow, http_client).execute(make_command())

    assert result.value.sent is False
    message = notification_uow.notifications.create.call_args[0][0]
    assert message.status == NotificationStatus.failed
    assert message.error_message


@pytest.mark.asyncio
async def test_send_notification_sale_not_found(notification_uow, http_client):
    notification_uow.sales.get_for_company = AsyncMock(return_value=None)

    result = await SendNotificationUseCase(notification_uow, http_client).execute(make_command())

    assert result.error.code == "SALE_NOT_FOUND"
    notification_uow.notifications.create.assert_not_called()


@pytest.mark.asyncio
async def test_send_notification_email_requires_address(notification_uow, http_client):
    result = await SendNotificationUseCase(notification_uow, http_client).execute(
        make_command(channel="email")
    )

    assert result.error.code == "MISSING_FIELDS"


@pytest.mark.asyncio
async def test_send_notification_invalid_channel(notification_uow, http_client):
    result = await SendNotificationUseCase(notification_uow, http_client).execute(
        make_command(channel="telegram")
    )

    assert result.error.code == "INVALID_CHANNEL"


@pytest.mark.asyncio
async def test_list_notifications(mock_uow):
    company_id = uuid4()
    mock_uow.notifications.list_by_company = AsyncMock(
        return_value=[
            NotificationMessage(
                id=uuid4(),
                company_id=company_id,
                message_type="reminder",
                attempted_channel="whatsapp",
                channel_used="email",
                destination="ana@example.com",
                message_body="Hola",
                status=NotificationStatus.sent,
            )
        ]
    )

    result = await ListNotificationsUseCase(mock_uow).execute(company_id, limit=1000)

    assert result.value.messages[0].status == "sent"
    assert result.value.messages[0].channel_used == "email"
    mock_uow.notifications.list_by_company.assert_called_once_with(company_id, sale_id=None, limit=500)


@pytest.mark.asyncio
async def test_send_notification_defaults_company_name(notification_uow, http_client):
    command = make_command(template_name="general", template_data={"clientName": "Ana", "message": "Hola"})

    await SendNotificationUseCase(notification_uow, http_client).execute(command)

    message = notification_uow.notifications.create.call_args[0][0]
    assert message.message_body.endswith("Salud SA")


@pytest.mark.asyncio
async def test_send_notification_releases_reads_before_delivery(notification_uow):
    commits_at_delivery = []

    def handler(request: httpx.Request):
        commits_at_delivery.append(notification_uow.commit.await_count)
        return httpx.Response(200, json={"id": "gw-2"})

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))

    result = await SendNotificationUseCase(notification_uow, http_client).execute(make_command())

    assert result.value.sent is True
    assert commits_at_delivery == [1]
