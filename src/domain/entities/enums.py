"""
Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class AppRole(str, Enum):
    """Staff role within a company"""

    super_admin = "super_admin"
    admin = "admin"
    supervisor = "supervisor"
    auditor = "auditor"
    gestor = "gestor"
    vendedor = "vendedor"
    financiero = "financiero"


class OtpChannel(str, Enum):
    """Delivery channel requested for an OTP"""

    email = "email"
    whatsapp = "whatsapp"
    smtp = "smtp"


class AuthMethod(str, Enum):
    """Identity verification method recorded on a verification"""

    OTP_EMAIL = "OTP_EMAIL"
    OTP_WHATSAPP = "OTP_WHATSAPP"


class VerificationResult(str, Enum):
    """Lifecycle state of an OTP verification record"""

    pending = "pending"
    verified = "verified"
    expired = "expired"
    max_attempts_exceeded = "max_attempts_exceeded"
    send_failed = "send_failed"
    superseded = "superseded"


class WhatsAppProvider(str, Enum):
    """WhatsApp delivery mechanism configured for a company"""

    meta = "meta"
    twilio = "twilio"
    gateway = "gateway"
    wame = "wame"


class ConditionType(str, Enum):
    """Kind of transition condition"""

    built_in = "built_in"
    custom = "custom"


class NotificationStatus(str, Enum):
    """Delivery status of a logged notification"""

    sent = "sent"
    failed = "failed"
