"""
Channel Dispatcher

Turns an abstract "deliver this to the recipient over channel X" request
into one provider call, falling back to e-mail once when WhatsApp cannot
deliver.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from src.domain.entities import OtpChannel

from .messaging import DeliveryResult, EmailMessage, EmailSender, MessagingProvider

logger = logging.getLogger(__name__)

REASON_WHATSAPP_DISABLED = "WhatsApp OTP deshabilitado"
REASON_NO_PHONE = "No se proporcionó número de teléfono"
REASON_WHATSAPP_NOT_CONFIGURED = "WhatsApp no configurado para la empresa"
REASON_NO_EMAIL = "No hay email del destinatario"


@dataclass(frozen=True)
class DispatchRequest:
    channel: str
    recipient_email: Optional[str]
    recipient_phone: Optional[str]
    email_subject: str
    email_html: str
    email_text: str
    whatsapp_body: str
    whatsapp_enabled: bool = True


@dataclass(frozen=True)
class DispatchOutcome:
    attempted_channel: str
    channel_used: str
    sent: bool
    fallback_used: bool
    fallback_reason: Optional[str]
    provider_used: Optional[str]
    destination: Optional[str]
    message_id: Optional[str] = None


class ChannelDispatcher:
    """
    Resolve a channel request into a concrete delivery.

    Business Rules:
    - email and smtp both go through the e-mail sender
    - WhatsApp that cannot even be attempted (disabled, no phone,
      no provider) falls back to e-mail immediately
    - A WhatsApp provider failure falls back to e-mail only when the
      recipient has an e-mail address
    - Fallback is one level deep; providers are never retried
    """

    def __init__(
        self,
        email_sender: EmailSender,
        whatsapp_provider: Optional[MessagingProvider] = None,
    ):
        self.email_sender = email_sender
        self.whatsapp_provider = whatsapp_provider

    async def dispatch(self, request: DispatchRequest) -> DispatchOutcome:
        if request.channel != OtpChannel.whatsapp.value:
            result = await self._send_email(request)
            return DispatchOutcome(
                attempted_channel=request.channel,
                channel_used=OtpChannel.email.value,
                sent=result.sent,
                fallback_used=False,
                fallback_reason=None if result.sent else result.reason,
                provider_used=result.provider,
                destination=request.recipient_email,
                message_id=result.message_id,
            )

        preflight_reason = self._whatsapp_preflight(request)
        if preflight_reason is not None:
            return await self._fallback_to_email(request, preflight_reason)

        result = await self.whatsapp_provider.send(request.recipient_phone, request.whatsapp_body)
        if result.sent:
            logger.info(f"WhatsApp message delivered via {result.provider}")
            return DispatchOutcome(
                attempted_channel=request.channel,
                channel_used=OtpChannel.whatsapp.value,
                sent=True,
                fallback_used=False,
                fallback_reason=None,
                provider_used=result.provider,
                destination=request.recipient_phone,
                message_id=result.message_id,
            )

        reason = result.reason or f"{result.provider} no pudo enviar el mensaje"
        if not request.recipient_email:
            logger.warning(f"WhatsApp delivery failed via {result.provider}, no e-mail to fall back to: {reason}")
            return DispatchOutcome(
                attempted_channel=request.channel,
                channel_used=OtpChannel.whatsapp.value,
                sent=False,
                fallback_used=False,
                fallback_reason=reason,
                provider_used=result.provider,
                destination=request.recipient_phone,
            )
        return await self._fallback_to_email(request, reason)

    def _whatsapp_preflight(self, request: DispatchRequest) -> Optional[str]:
        if not request.whatsapp_enabled:
            return REASON_WHATSAPP_DISABLED
        if not request.recipient_phone:
            return REASON_NO_PHONE
        if self.whatsapp_provider is None:
            return REASON_WHATSAPP_NOT_CONFIGURED
        return None

    async def _fallback_to_email(self, request: DispatchRequest, reason: str) -> DispatchOutcome:
        logger.warning(f"Falling back to e-mail: {reason}")
        result = await self._send_email(request)
        return DispatchOutcome(
            attempted_channel=request.channel,
            channel_used=OtpChannel.email.value,
            sent=result.sent,
            fallback_used=True,
            fallback_reason=reason if result.sent else f"{reason}; {result.reason}",
            provider_used=result.provider,
            destination=request.recipient_email,
            message_id=result.message_id,
        )

    async def _send_email(self, request: DispatchRequest) -> DeliveryResult:
        if not request.recipient_email:
            return DeliveryResult(sent=False, provider=self.email_sender.name, reason=REASON_NO_EMAIL)
        result = await self.email_sender.send(
            EmailMessage(
                to=request.recipient_email,
                subject=request.email_subject,
                html=request.email_html,
                text=request.email_text,
            )
        )
        if not result.sent:
            logger.warning(f"E-mail delivery failed via {result.provider}: {result.reason}")
        return result
