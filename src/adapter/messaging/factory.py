"""
Messaging provider factory keyed on company configuration.
"""

from typing import Optional

import httpx

from config import ApplicationConfig
from src.app.services.messaging import EmailSender, MessagingProvider
from src.domain.entities import CompanyMessagingSettings, CompanyOtpPolicy, WhatsAppProvider

from .smtp_relay import SmtpRelaySender
from .whatsapp_providers import (
    GatewayWhatsAppProvider,
    ManualWhatsAppProvider,
    MetaGraphWhatsAppProvider,
    TwilioWhatsAppProvider,
)


def build_whatsapp_provider(
    settings: Optional[CompanyMessagingSettings], client: httpx.AsyncClient
) -> Optional[MessagingProvider]:
    """
    Provider configured for the company, or None when it never
    configured WhatsApp.
    """
    if settings is None:
        return None

    provider = WhatsAppProvider(settings.whatsapp_provider)
    if provider == WhatsAppProvider.meta:
        return MetaGraphWhatsAppProvider(
            client,
            api_key=settings.whatsapp_api_key,
            phone_id=settings.whatsapp_phone_id,
            base_url=ApplicationConfig.WHATSAPP_GRAPH_API_URL,
        )
    if provider == WhatsAppProvider.twilio:
        return TwilioWhatsAppProvider(
            client,
            account_sid=settings.twilio_account_sid,
            auth_token=settings.twilio_auth_token,
            from_number=settings.twilio_whatsapp_from,
            base_url=ApplicationConfig.TWILIO_API_URL,
        )
    if provider == WhatsAppProvider.gateway:
        return GatewayWhatsAppProvider(
            client, gateway_url=settings.gateway_url, api_key=settings.gateway_api_key
        )
    return ManualWhatsAppProvider()


def build_email_sender(policy: CompanyOtpPolicy, client: httpx.AsyncClient) -> EmailSender:
    return SmtpRelaySender(client, policy)
