"""
Company Settings Use Case DTOs (Data Transfer Objects)

OTP policy and messaging provider settings as seen by company admins.
Secrets are write-only: responses only say whether they are set.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


def mask_secret(value: Optional[str]) -> Optional[str]:
    """'****' plus the last four characters, or None when unset"""
    if not value:
        return None
    return "****" + value[-4:] if len(value) > 4 else "****"


# ============================================================================
# Command DTOs
# ============================================================================


class UpdateOtpPolicyCommand(BaseModel):
    company_id: UUID
    user_id: UUID
    role: str

    require_otp_for_signature: bool = True
    otp_length: int = 6
    otp_expiration_seconds: int = 300
    max_attempts: int = 3
    default_channel: str = "email"
    allowed_channels: List[str] = Field(default_factory=lambda: ["email"])
    whatsapp_otp_enabled: bool = False

    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: Optional[str] = None  # None keeps the stored password
    smtp_from_address: str = ""
    smtp_from_name: str = ""
    smtp_tls: bool = True
    smtp_relay_url: Optional[str] = None


class UpdateMessagingSettingsCommand(BaseModel):
    company_id: UUID
    user_id: UUID
    role: str

    whatsapp_provider: str = "wame"
    whatsapp_api_key: Optional[str] = None
    whatsapp_phone_id: Optional[str] = None
    twilio_account_sid: Optional[str] = None
    twilio_auth_token: Optional[str] = None
    twilio_whatsapp_from: Optional[str] = None
    gateway_url: Optional[str] = None
    gateway_api_key: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class OtpPolicyResponse(BaseModel):
    is_default: bool
    require_otp_for_signature: bool
    otp_length: int
    otp_expiration_seconds: int
    max_attempts: int
    default_channel: str
    allowed_channels: List[str]
    whatsapp_otp_enabled: bool
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password_set: bool
    smtp_from_address: str
    smtp_from_name: str
    smtp_tls: bool
    smtp_relay_url: Optional[str] = None
    updated_at: Optional[datetime] = None


class MessagingSettingsResponse(BaseModel):
    is_default: bool
    whatsapp_provider: str
    whatsapp_api_key: Optional[str] = None
    whatsapp_phone_id: Optional[str] = None
    twilio_account_sid: Optional[str] = None
    twilio_auth_token: Optional[str] = None
    twilio_whatsapp_from: Optional[str] = None
    gateway_url: Optional[str] = None
    gateway_api_key: Optional[str] = None
    updated_at: Optional[datetime] = None
