"""
Notifications API Routes
"""

from typing import Dict, Optional
from uuid import UUID

import httpx
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import raise_for_error
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.notifications import ListNotificationsUseCase, SendNotificationUseCase
from src.app.use_cases.notifications.dtos import (
    NotificationListResponse,
    SendNotificationCommand,
    SendNotificationResponse,
)
from src.depends import get_current_user, get_http_client, get_unit_of_work

router = APIRouter(prefix="/notifications", tags=["Notifications"])

STATUS_BY_CODE = {
    "INVALID_CHANNEL": status.HTTP_400_BAD_REQUEST,
    "MISSING_FIELDS": status.HTTP_400_BAD_REQUEST,
    "SALE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
}


class SendNotificationRequest(BaseModel):
    """POST /notifications request payload"""

    sale_id: Optional[UUID] = None
    template_name: str = "general"
    template_data: Dict[str, str] = Field(default_factory=dict)
    channel: str = "whatsapp"
    recipient_email: Optional[EmailStr] = None
    recipient_phone: Optional[str] = None


@router.post("", status_code=status.HTTP_200_OK, response_model=SendNotificationResponse)
async def send_notification(
    payload: SendNotificationRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    http_client: httpx.AsyncClient = Depends(get_http_client),
):
    """
    Send a templated notification to a client

    Templates: signature_link, questionnaire, reminder, approval,
    rejection, general. Delivery failures are reported with sent=false,
    not as an HTTP error.
    """
    command = SendNotificationCommand(
        company_id=UUID(current_user["company_id"]),
        user_id=UUID(current_user["user_id"]),
        **payload.model_dump(),
    )
    result = await SendNotificationUseCase(uow, http_client).execute(command)
    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)
    return result.value


@router.get("", status_code=status.HTTP_200_OK, response_model=NotificationListResponse)
async def list_notifications(
    sale_id: Optional[UUID] = Query(None, description="Only messages of this sale"),
    limit: int = Query(100, ge=1, le=500),
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await ListNotificationsUseCase(uow).execute(
        UUID(current_user["company_id"]), sale_id=sale_id, limit=limit
    )
    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)
    return result.value
