"""
Company Settings API Routes

OTP policy and WhatsApp provider configuration.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import raise_for_error
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.settings import (
    GetMessagingSettingsUseCase,
    GetOtpPolicyAdminUseCase,
    UpdateMessagingSettingsUseCase,
    UpdateOtpPolicyUseCase,
)
from src.app.use_cases.settings.dtos import (
    MessagingSettingsResponse,
    OtpPolicyResponse,
    UpdateMessagingSettingsCommand,
    UpdateOtpPolicyCommand,
)
from src.depends import get_current_user, get_unit_of_work

router = APIRouter(tags=["Settings"])

STATUS_BY_CODE = {
    "INSUFFICIENT_ROLE": status.HTTP_403_FORBIDDEN,
    "INVALID_OTP_POLICY": status.HTTP_400_BAD_REQUEST,
    "INVALID_PROVIDER": status.HTTP_400_BAD_REQUEST,
}


class OtpPolicyRequest(BaseModel):
    """PUT /otp-policy request payload"""

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
    smtp_password: Optional[str] = None
    smtp_from_address: str = ""
    smtp_from_name: str = ""
    smtp_tls: bool = True
    smtp_relay_url: Optional[str] = None


class MessagingSettingsRequest(BaseModel):
    """PUT /messaging-settings request payload"""

    whatsapp_provider: str = "wame"
    whatsapp_api_key: Optional[str] = None
    whatsapp_phone_id: Optional[str] = None
    twilio_account_sid: Optional[str] = None
    twilio_auth_token: Optional[str] = None
    twilio_whatsapp_from: Optional[str] = None
    gateway_url: Optional[str] = None
    gateway_api_key: Optional[str] = None


@router.get("/otp-policy", status_code=status.HTTP_200_OK, response_model=OtpPolicyResponse)
async def get_otp_policy(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetOtpPolicyAdminUseCase(uow).execute(UUID(current_user["company_id"]))
    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)
    return result.value


@router.put("/otp-policy", status_code=status.HTTP_200_OK, response_model=OtpPolicyResponse)
async def put_otp_policy(
    payload: OtpPolicyRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Replace the OTP policy of the caller's company

    Raises:
        - 400 Bad Request: Policy invalid (problems lists each issue)
        - 403 Forbidden: Caller is not admin / super_admin
    """
    command = UpdateOtpPolicyCommand(
        company_id=UUID(current_user["company_id"]),
        user_id=UUID(current_user["user_id"]),
        role=current_user["role"],
        **payload.model_dump(),
    )
    result = await UpdateOtpPolicyUseCase(uow).execute(command)
    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)
    return result.value


@router.get(
    "/messaging-settings",
    status_code=status.HTTP_200_OK,
    response_model=MessagingSettingsResponse,
)
async def get_messaging_settings(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetMessagingSettingsUseCase(uow).execute(
        UUID(current_user["company_id"]), current_user["role"]
    )
    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)
    return result.value


@router.put(
    "/messaging-settings",
    status_code=status.HTTP_200_OK,
    response_model=MessagingSettingsResponse,
)
async def put_messaging_settings(
    payload: MessagingSettingsRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    command = UpdateMessagingSettingsCommand(
        company_id=UUID(current_user["company_id"]),
        user_id=UUID(current_user["user_id"]),
        role=current_user["role"],
        **payload.model_dump(),
    )
    result = await UpdateMessagingSettingsUseCase(uow).execute(command)
    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)
    return result.value
