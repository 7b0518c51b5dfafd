"""
Notification Use Case DTOs (Data Transfer Objects)
"""

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class SendNotificationCommand(BaseModel):
    """Send a templated notification to a client"""

    company_id: UUID
    user_id: UUID
    sale_id: Optional[UUID] = None
    template_name: str = "general"
    template_data: Dict[str, str] = Field(default_factory=dict)
    channel: str = "whatsapp"
    recipient_email: Optional[str] = None
    recipient_phone: Optional[str] = None


class SendNotificationResponse(BaseModel):
    notification_id: str
    sent: bool
    attempted_channel: str
    channel_used: str
    fallback_used: bool
    fallback_reason: Optional[str] = None
    provider_used: Optional[str] = None
    message_id: Optional[str] = None


class NotificationMessageView(BaseModel):
    id: UUID
    sale_id: Optional[UUID] = None
    message_type: str
    attempted_channel: str
    channel_used: str
    provider_used: Optional[str] = None
    destination: str
    status: str
    error_message: Optional[str] = None
    sent_at: Optional[datetime] = None
    created_at: datetime


class NotificationListResponse(BaseModel):
    messages: List[NotificationMessageView]
