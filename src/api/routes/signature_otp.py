"""
Signature OTP API Routes

Public endpoint used by the signer page. It is not behind JWT: the
signature link itself is the credential.
"""

from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, field_validator

from src.api.error import ClientError, raise_for_error
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.signature_otp import GetOtpPolicyUseCase, SendOtpUseCase, VerifyOtpUseCase
from src.app.use_cases.signature_otp.dtos import SendOtpCommand, VerifyOtpCommand
from src.depends import get_http_client, get_unit_of_work
from src.libs.result import Error

router = APIRouter(tags=["Signature OTP"])

STATUS_BY_CODE = {
    "MISSING_FIELDS": status.HTTP_400_BAD_REQUEST,
    "INVALID_FIELDS": status.HTTP_400_BAD_REQUEST,
    "INVALID_CHANNEL": status.HTTP_400_BAD_REQUEST,
    "CHANNEL_NOT_ALLOWED": status.HTTP_400_BAD_REQUEST,
    "OTP_EXPIRED": status.HTTP_400_BAD_REQUEST,
    "INVALID_OTP": status.HTTP_400_BAD_REQUEST,
    "SALE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "NO_PENDING_VERIFICATION": status.HTTP_404_NOT_FOUND,
    "MAX_ATTEMPTS_EXCEEDED": status.HTTP_429_TOO_MANY_REQUESTS,
}


class SignatureOtpRequest(BaseModel):
    """
    POST /signature-otp request payload; fields required depend on action.

    Values are taken as text so the use cases report malformed input.
    """

    action: Optional[str] = None
    signature_link_id: Optional[str] = None
    sale_id: Optional[str] = None
    recipient_email: Optional[str] = None
    recipient_phone: Optional[str] = None
    channel: Optional[str] = None
    otp_code: Optional[str] = None

    @field_validator("signature_link_id", "sale_id", "recipient_phone", "otp_code", mode="before")
    @classmethod
    def numbers_as_text(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    ip = request.headers.get("cf-connecting-ip")
    if ip:
        return ip
    if request.client is not None and request.client.host:
        return request.client.host
    return "unknown"


@router.post("/signature-otp", status_code=status.HTTP_200_OK)
async def signature_otp(
    payload: SignatureOtpRequest,
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    http_client: httpx.AsyncClient = Depends(get_http_client),
):
    """
    Signature OTP actions

    Actions:
        - send: issue a code and deliver it (WhatsApp falls back to e-mail)
        - verify: check a code against the latest pending verification
        - get_policy: channels the signer page may offer for a sale

    Raises:
        - 400 Bad Request: Missing or malformed fields, invalid/disallowed channel,
          expired (expired=true) or wrong code (attempts_remaining)
        - 404 Not Found: Sale or pending verification not found
        - 429 Too Many Requests: Maximum attempts exceeded
        - 500 Internal Server Error: Server error
    """
    ip_address = client_ip(request)
    user_agent = request.headers.get("user-agent", "unknown")

    if payload.action == "send":
        result = await SendOtpUseCase(uow, http_client).execute(
            SendOtpCommand(
                signature_link_id=payload.signature_link_id,
                sale_id=payload.sale_id,
                recipient_email=payload.recipient_email,
                recipient_phone=payload.recipient_phone,
                channel=payload.channel,
                ip_address=ip_address,
                user_agent=user_agent,
            )
        )
    elif payload.action == "verify":
        result = await VerifyOtpUseCase(uow).execute(
            VerifyOtpCommand(
                signature_link_id=payload.signature_link_id,
                otp_code=payload.otp_code,
                ip_address=ip_address,
                user_agent=user_agent,
            )
        )
    elif payload.action == "get_policy":
        result = await GetOtpPolicyUseCase(uow).execute(payload.sale_id)
    else:
        raise ClientError(Error("INVALID_ACTION", "Invalid action"))

    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)

    return result.value
