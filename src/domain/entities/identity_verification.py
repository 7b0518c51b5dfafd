"""
SignatureIdentityVerification Entity

OTP verification attempts tied to a signature link.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow

from .enums import AuthMethod, VerificationResult


class SignatureIdentityVerification(SQLModel, table=True):
    """
    SignatureIdentityVerification entity - one OTP issued for a signature link.

    Business Rules:
    - Stores SHA-256 hex of the code, never the plaintext
    - Only the newest pending record of a link can be verified
    - A new pending record supersedes older pending ones
    - attempts never exceeds max_attempts
    - Never deleted (audit trail)
    """

    __tablename__ = "signature_identity_verifications"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    signature_link_id: UUID = Field(index=True)
    sale_id: UUID = Field(foreign_key="sales.id", index=True)

    auth_method: AuthMethod = Field(default=AuthMethod.OTP_EMAIL)
    channel_used: str = Field(default="email", max_length=20)
    provider_used: Optional[str] = Field(default=None, max_length=50)
    destination_masked: str = Field(max_length=255)
    otp_code_hash: str = Field(max_length=64)  # SHA-256 output

    expires_at: datetime = Field(sa_column=Column(DateTime))
    max_attempts: int = Field(default=3)
    attempts: int = Field(default=0)
    result: VerificationResult = Field(default=VerificationResult.pending)

    ip_address: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=512)

    # Timestamps
    verified_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_verification_link_result", "signature_link_id", "result"),
        Index("idx_verification_created_at", "created_at"),
    )
