"""
Unit tests for the SMTP relay e-mail sender
"""

import json

import httpx
import pytest

from src.adapter.messaging.smtp_relay import REASON_RELAY_NOT_CONFIGURED, SmtpRelaySender
from src.app.services.messaging import EmailMessage
from src.domain.entities import CompanyOtpPolicy

MESSAGE = EmailMessage(to="ana@example.com", subject="Código", html="<p>1</p>", text="1")


@pytest.mark.asyncio
async def test_relay_not_configured():
    async with httpx.AsyncClient() as client:
        result = await SmtpRelaySender(client, CompanyOtpPolicy.default_for()).send(MESSAGE)

    assert result.sent is False
    assert result.reason == REASON_RELAY_NOT_CONFIGURED


@pytest.mark.asyncio
async def test_relay_receives_message_and_smtp_parameters():
    captured = {}

    def handler(request: httpx.Request):
        captured["url"] = str(request.url)
        captured["body"] = json.loads(request.content)
        return httpx.Response(202, json={"id": "mail-1"})

    policy = CompanyOtpPolicy(
        smtp_relay_url="https://relay.test/send",
        smtp_host="smtp.empresa.com",
        smtp_port=465,
        smtp_user="firma",
        smtp_password="s3cret",
        smtp_from_address="firma@empresa.com",
        smtp_from_name="Empresa",
    )
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        result = await SmtpRelaySender(client, policy).send(MESSAGE)

    assert result.sent is True
    assert result.message_id == "mail-1"
    assert captured["url"] == "https://relay.test/send"
    assert captured["body"]["to"] == "ana@example.com"
    assert captured["body"]["smtp"]["host"] == "smtp.empresa.com"
    assert captured["body"]["smtp"]["port"] == 465
    assert captured["body"]["from"] == {"address": "firma@empresa.com", "name": "Empresa"}


@pytest.mark.asyncio
async def test_relay_error_status_is_failure():
    def handler(request):
        return httpx.Response(502)

    policy = CompanyOtpPolicy(smtp_relay_url="https://relay.test/send")
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        result = await SmtpRelaySender(client, policy).send(MESSAGE)

    assert result.sent is False
    assert "502" in result.reason
