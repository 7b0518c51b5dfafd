"""
Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    AppRole,
    OtpChannel,
    AuthMethod,
    VerificationResult,
    WhatsAppProvider,
    ConditionType,
    NotificationStatus,
)

# Export all entities
from .company import Company
from .sale import Sale
from .otp_policy import CompanyOtpPolicy
from .messaging_settings import CompanyMessagingSettings
from .identity_verification import SignatureIdentityVerification
from .workflow_config import CompanyWorkflowConfig
from .notification_message import NotificationMessage
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "AppRole",
    "OtpChannel",
    "AuthMethod",
    "VerificationResult",
    "WhatsAppProvider",
    "ConditionType",
    "NotificationStatus",
    # Entities
    "Company",
    "Sale",
    "CompanyOtpPolicy",
    "CompanyMessagingSettings",
    "SignatureIdentityVerification",
    "CompanyWorkflowConfig",
    "NotificationMessage",
    "AuditEvent",
]
