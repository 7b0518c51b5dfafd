"""
Unit tests for WhatsApp providers against a mocked HTTP transport
"""

import json

import httpx
import pytest

from src.adapter.messaging.factory import build_whatsapp_provider
from src.adapter.messaging.whatsapp_providers import (
    GatewayWhatsAppProvider,
    ManualWhatsAppProvider,
    MetaGraphWhatsAppProvider,
    TwilioWhatsAppProvider,
    normalize_phone,
)
from src.domain.entities import CompanyMessagingSettings, WhatsAppProvider


def mock_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_normalize_phone():
    assert normalize_phone("+595 (981) 123-456") == "595981123456"


@pytest.mark.asyncio
async def test_meta_success():
    captured = {}

    def handler(request: httpx.Request):
        captured["url"] = str(request.url)
        captured["auth"] = request.headers["Authorization"]
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"messages": [{"id": "wamid.1"}]})

    async with mock_client(handler) as client:
        provider = MetaGraphWhatsAppProvider(
            client, api_key="token", phone_id="12345", base_url="https://graph.test/v18.0"
        )
        result = await provider.send("+595 981 123456", "hola")

    assert result.sent is True
    assert result.provider == "meta"
    assert result.message_id == "wamid.1"
    assert captured["url"] == "https://graph.test/v18.0/12345/messages"
    assert captured["auth"] == "Bearer token"
    assert captured["body"]["messaging_product"] == "whatsapp"
    assert captured["body"]["to"] == "595981123456"
    assert captured["body"]["text"] == {"body": "hola"}


@pytest.mark.asyncio
async def test_meta_error_reports_provider_message():
    def handler(request):
        return httpx.Response(401, json={"error": {"message": "Invalid OAuth access token"}})

    async with mock_client(handler) as client:
        provider = MetaGraphWhatsAppProvider(client, "bad", "12345", "https://graph.test")
        result = await provider.send("595981123456", "hola")

    assert result.sent is False
    assert "Invalid OAuth access token" in result.reason


@pytest.mark.asyncio
async def test_meta_missing_credentials_does_not_call():
    def handler(request):
        raise AssertionError("must not be called")

    async with mock_client(handler) as client:
        result = await MetaGraphWhatsAppProvider(client, None, None, "https://graph.test").send("1", "x")

    assert result.sent is False


@pytest.mark.asyncio
async def test_network_error_is_a_failed_delivery():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with mock_client(handler) as client:
        provider = GatewayWhatsAppProvider(client, "https://gw.test", "k")
        result = await provider.send("595981123456", "hola")

    assert result.sent is False
    assert result.provider == "gateway"


@pytest.mark.asyncio
async def test_twilio_success():
    captured = {}

    def handler(request: httpx.Request):
        captured["url"] = str(request.url)
        captured["form"] = dict(httpx.QueryParams(request.content.decode()))
        captured["auth"] = request.headers["Authorization"]
        return httpx.Response(201, json={"sid": "SM123"})

    async with mock_client(handler) as client:
        provider = TwilioWhatsAppProvider(
            client, "AC1", "secret", "+1 415 555 0100", "https://twilio.test/2010-04-01"
        )
        result = await provider.send("+595981123456", "hola")

    assert result.sent is True
    assert result.message_id == "SM123"
    assert captured["url"] == "https://twilio.test/2010-04-01/Accounts/AC1/Messages.json"
    assert captured["form"]["To"] == "whatsapp:+595981123456"
    assert captured["form"]["From"] == "whatsapp:+14155550100"
    assert captured["auth"].startswith("Basic ")


@pytest.mark.asyncio
async def test_gateway_success_sends_api_key():
    captured = {}

    def handler(request: httpx.Request):
        captured["url"] = str(request.url)
        captured["key"] = request.headers.get("X-API-Key")
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "gw-9"})

    async with mock_client(handler) as client:
        result = await GatewayWhatsAppProvider(client, "https://gw.test/", "k").send("+595 981", "hola")

    assert result.sent is True
    assert captured["url"] == "https://gw.test/messages"
    assert captured["key"] == "k"
    assert captured["body"] == {"phone": "595981", "message": "hola"}


@pytest.mark.asyncio
async def test_manual_mode_never_sends():
    result = await ManualWhatsAppProvider().send("+595 981 123456", "hola")

    assert result.sent is False
    assert result.provider == "wame"
    assert "https://wa.me/595981123456" in result.reason


@pytest.mark.asyncio
async def test_factory_selects_provider():
    async with httpx.AsyncClient() as client:
        assert build_whatsapp_provider(None, client) is None

        settings = CompanyMessagingSettings(whatsapp_provider=WhatsAppProvider.meta)
        assert isinstance(build_whatsapp_provider(settings, client), MetaGraphWhatsAppProvider)

        settings = CompanyMessagingSettings(whatsapp_provider=WhatsAppProvider.twilio)
        assert isinstance(build_whatsapp_provider(settings, client), TwilioWhatsAppProvider)

        settings = CompanyMessagingSettings(whatsapp_provider=WhatsAppProvider.wame)
        assert isinstance(build_whatsapp_provider(settings, client), ManualWhatsAppProvider)
