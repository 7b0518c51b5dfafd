"""
NotificationMessage Entity

Log of every templated notification sent to a client.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow

from .enums import NotificationStatus


class NotificationMessage(SQLModel, table=True):
    """
    NotificationMessage entity - immutable delivery log.

    Business Rules:
    - Written once per dispatch, success or failure
    - Records the channel actually used after fallback
    """

    __tablename__ = "notification_messages"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    company_id: UUID = Field(foreign_key="companies.id", index=True)
    sale_id: Optional[UUID] = Field(default=None, index=True)

    message_type: str = Field(max_length=50)
    attempted_channel: str = Field(max_length=20)
    channel_used: str = Field(max_length=20)
    provider_used: Optional[str] = Field(default=None, max_length=50)
    destination: str = Field(max_length=255)
    message_body: str

    status: NotificationStatus = Field(default=NotificationStatus.sent)
    error_message: Optional[str] = Field(default=None, max_length=1024)
    provider_message_id: Optional[str] = Field(default=None, max_length=255)

    sent_by: Optional[UUID] = None

    # Timestamps
    sent_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_notification_sale_created", "sale_id", "created_at"),)
