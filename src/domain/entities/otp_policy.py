"""
CompanyOtpPolicy Entity

Per-company OTP rules and SMTP parameters.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, SQLModel

from src.domain.base import utcnow

DEFAULT_OTP_LENGTH = 6
DEFAULT_OTP_EXPIRATION_SECONDS = 300
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_CHANNEL = "email"


class CompanyOtpPolicy(SQLModel, table=True):
    """
    CompanyOtpPolicy entity - OTP policy of one company.

    Business Rules:
    - One row per company, read on every OTP send
    - allowed_channels is never empty
    - Email is always the ultimate fallback, even if not listed
    - SMTP parameters are forwarded to the relay, never used directly
    """

    __tablename__ = "company_otp_policies"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    company_id: UUID = Field(foreign_key="companies.id", unique=True, index=True)

    require_otp_for_signature: bool = Field(default=True)
    otp_length: int = Field(default=DEFAULT_OTP_LENGTH)
    otp_expiration_seconds: int = Field(default=DEFAULT_OTP_EXPIRATION_SECONDS)
    max_attempts: int = Field(default=DEFAULT_MAX_ATTEMPTS)
    default_channel: str = Field(default=DEFAULT_CHANNEL, max_length=20)
    allowed_channels: List[str] = Field(
        default_factory=lambda: [DEFAULT_CHANNEL], sa_column=Column(JSON)
    )
    whatsapp_otp_enabled: bool = Field(default=False)

    # SMTP relay
    smtp_host: str = Field(default="", max_length=255)
    smtp_port: int = Field(default=587)
    smtp_user: str = Field(default="", max_length=255)
    smtp_password: str = Field(default="", max_length=255)
    smtp_from_address: str = Field(default="", max_length=255)
    smtp_from_name: str = Field(default="", max_length=255)
    smtp_tls: bool = Field(default=True)
    smtp_relay_url: Optional[str] = Field(default=None, max_length=1024)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    @classmethod
    def default_for(cls, company_id: Optional[UUID] = None) -> "CompanyOtpPolicy":
        """Policy used when the company never configured one"""
        return cls(company_id=company_id)
