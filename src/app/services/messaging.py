"""
Messaging provider interfaces - application layer.

Every delivery mechanism reports a DeliveryResult instead of raising,
so callers can fall back and surface the reason.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DeliveryResult:
    sent: bool
    provider: str
    reason: Optional[str] = None
    message_id: Optional[str] = None


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    html: str
    text: str


class MessagingProvider(ABC):
    """WhatsApp provider interface"""

    name: str

    @abstractmethod
    async def send(self, to_phone: str, body: str) -> DeliveryResult:
        """Send a plain-text WhatsApp message"""
        pass


class EmailSender(ABC):
    """Transactional e-mail interface"""

    name: str

    @abstractmethod
    async def send(self, message: EmailMessage) -> DeliveryResult:
        """Send an e-mail message"""
        pass
