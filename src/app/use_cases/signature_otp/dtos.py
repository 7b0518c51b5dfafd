"""
Signature OTP Use Case DTOs (Data Transfer Objects)

Command and Response classes for the signer-facing OTP flow. Identifiers
and the code arrive as raw text from the signer page and are parsed by
the use cases, so malformed input is reported as a business error.
"""

from typing import Dict, List, Optional, Tuple
from uuid import UUID

from pydantic import BaseModel, field_validator


def parse_ids(values: Dict[str, str]) -> Tuple[Dict[str, UUID], List[str]]:
    """Parse identifier fields; returns the parsed ids and the names that are not UUIDs"""
    parsed, invalid = {}, []
    for name, value in values.items():
        try:
            parsed[name] = UUID(str(value))
        except ValueError:
            invalid.append(name)
    return parsed, invalid


# ============================================================================
# Command DTOs
# ============================================================================


class SendOtpCommand(BaseModel):
    """Issue and deliver a new OTP for a signature link"""

    signature_link_id: Optional[str] = None
    sale_id: Optional[str] = None
    recipient_email: Optional[str] = None
    recipient_phone: Optional[str] = None
    channel: Optional[str] = None
    ip_address: str = "unknown"
    user_agent: str = "unknown"

    @field_validator("signature_link_id", "sale_id", mode="before")
    @classmethod
    def as_text(cls, value):
        return None if value is None else str(value)


class VerifyOtpCommand(BaseModel):
    """Check a submitted OTP against the latest pending verification"""

    signature_link_id: Optional[str] = None
    otp_code: Optional[str] = None
    ip_address: str = "unknown"
    user_agent: str = "unknown"

    @field_validator("signature_link_id", "otp_code", mode="before")
    @classmethod
    def as_text(cls, value):
        return None if value is None else str(value)


# ============================================================================
# Response DTOs
# ============================================================================


class SendOtpResponse(BaseModel):
    """Response for send OTP use case"""

    success: bool = True
    verification_id: str
    destination_masked: str
    expires_at: str
    attempted_channel: str
    channel_used: str
    sent: bool
    fallback_used: bool
    fallback_reason: Optional[str] = None
    provider_used: Optional[str] = None


class VerifyOtpResponse(BaseModel):
    """Response for verify OTP use case"""

    success: bool = True
    verified: bool = True
    verification_id: str


class SignerOtpPolicyResponse(BaseModel):
    """OTP policy as seen by the signer page"""

    require_otp: bool
    allowed_channels: List[str]
    default_channel: str
    whatsapp_enabled: bool
