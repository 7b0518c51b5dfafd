import logging

import httpx

from src.app.services.messaging import DeliveryResult, EmailMessage, EmailSender
from src.domain.entities import CompanyOtpPolicy

from .whatsapp_providers import json_or_empty

logger = logging.getLogger(__name__)

REASON_RELAY_NOT_CONFIGURED = "SMTP relay no configurado para la empresa"


class SmtpRelaySender(EmailSender):
    """
    E-mail through the company's SMTP relay.

    The relay receives the rendered message together with the company's
    SMTP parameters; there is no built-in default e-mail provider.
    """

    name = "smtp_relay"

    def __init__(self, client: httpx.AsyncClient, policy: CompanyOtpPolicy):
        self.client = client
        self.policy = policy

    async def send(self, message: EmailMessage) -> DeliveryResult:
        if not self.policy.smtp_relay_url:
            return DeliveryResult(sent=False, provider=self.name, reason=REASON_RELAY_NOT_CONFIGURED)

        policy = self.policy
        payload = {
            "to": message.to,
            "subject": message.subject,
            "html": message.html,
            "text": message.text,
            "from": {"address": policy.smtp_from_address, "name": policy.smtp_from_name},
            "smtp": {
                "host": policy.smtp_host,
                "port": policy.smtp_port,
                "user": policy.smtp_user,
                "password": policy.smtp_password,
                "tls": policy.smtp_tls,
            },
        }

        try:
            response = await self.client.post(policy.smtp_relay_url, json=payload)
        except httpx.HTTPError as exc:
            logger.error(f"SMTP relay request failed: {exc}")
            return DeliveryResult(sent=False, provider=self.name, reason=f"SMTP relay no disponible: {exc}")

        if not response.is_success:
            return DeliveryResult(
                sent=False,
                provider=self.name,
                reason=f"SMTP relay respondió con error HTTP {response.status_code}",
            )

        return DeliveryResult(sent=True, provider=self.name, message_id=json_or_empty(response).get("id"))
