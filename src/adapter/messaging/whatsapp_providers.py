"""
WhatsApp provider implementations.

One class per delivery mechanism; all of them report failures through
DeliveryResult and never raise on HTTP errors.
"""

import logging
import re
from typing import Optional

import httpx

from src.app.services.messaging import DeliveryResult, MessagingProvider

logger = logging.getLogger(__name__)

_PHONE_NOISE = re.compile(r"[\s+\-()]")


def normalize_phone(phone: str) -> str:
    """Digits only, the format every provider expects"""
    return _PHONE_NOISE.sub("", phone)


def json_or_empty(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


class MetaGraphWhatsAppProvider(MessagingProvider):
    """WhatsApp Business Cloud API (Graph API)"""

    name = "meta"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: Optional[str],
        phone_id: Optional[str],
        base_url: str,
    ):
        self.client = client
        self.api_key = api_key
        self.phone_id = phone_id
        self.base_url = base_url.rstrip("/")

    async def send(self, to_phone: str, body: str) -> DeliveryResult:
        if not self.api_key or not self.phone_id:
            return DeliveryResult(
                sent=False, provider=self.name, reason="Credenciales de WhatsApp (Meta) incompletas"
            )

        try:
            response = await self.client.post(
                f"{self.base_url}/{self.phone_id}/messages",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={
                    "messaging_product": "whatsapp",
                    "recipient_type": "individual",
                    "to": normalize_phone(to_phone),
                    "type": "text",
                    "text": {"body": body},
                },
            )
        except httpx.HTTPError as exc:
            logger.error(f"Meta WhatsApp request failed: {exc}")
            return DeliveryResult(sent=False, provider=self.name, reason=f"Error de red con Meta: {exc}")

        payload = json_or_empty(response)
        if not response.is_success:
            message = (payload.get("error") or {}).get("message") or "No se pudo enviar el mensaje"
            return DeliveryResult(sent=False, provider=self.name, reason=f"Meta rechazó el mensaje: {message}")

        messages = payload.get("messages") or [{}]
        return DeliveryResult(sent=True, provider=self.name, message_id=messages[0].get("id"))


class TwilioWhatsAppProvider(MessagingProvider):
    """Twilio Programmable Messaging with a WhatsApp sender"""

    name = "twilio"

    def __init__(
        self,
        client: httpx.AsyncClient,
        account_sid: Optional[str],
        auth_token: Optional[str],
        from_number: Optional[str],
        base_url: str,
    ):
        self.client = client
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.base_url = base_url.rstrip("/")

    async def send(self, to_phone: str, body: str) -> DeliveryResult:
        if not self.account_sid or not self.auth_token or not self.from_number:
            return DeliveryResult(
                sent=False, provider=self.name, reason="Credenciales de Twilio incompletas"
            )

        try:
            response = await self.client.post(
                f"{self.base_url}/Accounts/{self.account_sid}/Messages.json",
                auth=(self.account_sid, self.auth_token),
                data={
                    "From": f"whatsapp:+{normalize_phone(self.from_number)}",
                    "To": f"whatsapp:+{normalize_phone(to_phone)}",
                    "Body": body,
                },
            )
        except httpx.HTTPError as exc:
            logger.error(f"Twilio WhatsApp request failed: {exc}")
            return DeliveryResult(sent=False, provider=self.name, reason=f"Error de red con Twilio: {exc}")

        payload = json_or_empty(response)
        if not response.is_success:
            message = payload.get("message") or f"HTTP {response.status_code}"
            return DeliveryResult(sent=False, provider=self.name, reason=f"Twilio rechazó el mensaje: {message}")

        return DeliveryResult(sent=True, provider=self.name, message_id=payload.get("sid"))


class GatewayWhatsAppProvider(MessagingProvider):
    """Self-hosted WhatsApp gateway exposing POST {url}/messages"""

    name = "gateway"

    def __init__(
        self, client: httpx.AsyncClient, gateway_url: Optional[str], api_key: Optional[str]
    ):
        self.client = client
        self.gateway_url = gateway_url
        self.api_key = api_key

    async def send(self, to_phone: str, body: str) -> DeliveryResult:
        if not self.gateway_url:
            return DeliveryResult(
                sent=False, provider=self.name, reason="URL del gateway de WhatsApp no configurada"
            )

        headers = {"X-API-Key": self.api_key} if self.api_key else {}
        try:
            response = await self.client.post(
                f"{self.gateway_url.rstrip('/')}/messages",
                headers=headers,
                json={"phone": normalize_phone(to_phone), "message": body},
            )
        except httpx.HTTPError as exc:
            logger.error(f"WhatsApp gateway request failed: {exc}")
            return DeliveryResult(
                sent=False, provider=self.name, reason=f"Gateway de WhatsApp no disponible: {exc}"
            )

        payload = json_or_empty(response)
        if not response.is_success:
            message = payload.get("error") or f"HTTP {response.status_code}"
            return DeliveryResult(sent=False, provider=self.name, reason=f"El gateway rechazó el mensaje: {message}")

        return DeliveryResult(sent=True, provider=self.name, message_id=payload.get("id"))


class ManualWhatsAppProvider(MessagingProvider):
    """wa.me mode: a person has to open the chat, nothing is sent"""

    name = "wame"

    async def send(self, to_phone: str, body: str) -> DeliveryResult:
        return DeliveryResult(
            sent=False,
            provider=self.name,
            reason=(
                "Modo manual (wa.me): el mensaje debe enviarse abriendo el chat "
                f"https://wa.me/{normalize_phone(to_phone)}"
            ),
        )
