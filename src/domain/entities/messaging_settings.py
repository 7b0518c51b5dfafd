"""
CompanyMessagingSettings Entity

WhatsApp provider selection and credentials for one company.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utcnow

from .enums import WhatsAppProvider


class CompanyMessagingSettings(SQLModel, table=True):
    """
    CompanyMessagingSettings entity.

    Business Rules:
    - One row per company
    - Only the credentials of the selected provider are used
    - wame (manual) mode needs no credentials and never sends
    """

    __tablename__ = "company_messaging_settings"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    company_id: UUID = Field(foreign_key="companies.id", unique=True, index=True)

    whatsapp_provider: WhatsAppProvider = Field(default=WhatsAppProvider.wame)

    # Meta Graph API
    whatsapp_api_key: Optional[str] = Field(default=None, max_length=512)
    whatsapp_phone_id: Optional[str] = Field(default=None, max_length=64)

    # Twilio
    twilio_account_sid: Optional[str] = Field(default=None, max_length=64)
    twilio_auth_token: Optional[str] = Field(default=None, max_length=128)
    twilio_whatsapp_from: Optional[str] = Field(default=None, max_length=32)

    # Self-hosted gateway
    gateway_url: Optional[str] = Field(default=None, max_length=1024)
    gateway_api_key: Optional[str] = Field(default=None, max_length=512)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
