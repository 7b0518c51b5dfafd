"""
OTP Policy Use Cases

Admin read / update of a company's OTP policy.
"""

from typing import List
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import AppRole, AuditEvent, CompanyOtpPolicy, OtpChannel
from src.domain.otp import ALLOWED_OTP_LENGTHS
from src.libs.result import Error, Result, Return
from .dtos import OtpPolicyResponse, UpdateOtpPolicyCommand

MIN_OTP_EXPIRATION_SECONDS = 60


def to_policy_response(policy: CompanyOtpPolicy, is_default: bool) -> OtpPolicyResponse:
    return OtpPolicyResponse(
        is_default=is_default,
        require_otp_for_signature=policy.require_otp_for_signature,
        otp_length=policy.otp_length,
        otp_expiration_seconds=policy.otp_expiration_seconds,
        max_attempts=policy.max_attempts,
        default_channel=policy.default_channel,
        allowed_channels=list(policy.allowed_channels),
        whatsapp_otp_enabled=policy.whatsapp_otp_enabled,
        smtp_host=policy.smtp_host,
        smtp_port=policy.smtp_port,
        smtp_user=policy.smtp_user,
        smtp_password_set=bool(policy.smtp_password),
        smtp_from_address=policy.smtp_from_address,
        smtp_from_name=policy.smtp_from_name,
        smtp_tls=policy.smtp_tls,
        smtp_relay_url=policy.smtp_relay_url,
        updated_at=None if is_default else policy.updated_at,
    )


def _policy_problems(command: UpdateOtpPolicyCommand) -> List[str]:
    problems = []
    if command.otp_length not in ALLOWED_OTP_LENGTHS:
        problems.append(
            f"otp_length must be one of {', '.join(str(n) for n in ALLOWED_OTP_LENGTHS)}"
        )
    if command.otp_expiration_seconds < MIN_OTP_EXPIRATION_SECONDS:
        problems.append(f"otp_expiration_seconds must be at least {MIN_OTP_EXPIRATION_SECONDS}")
    if command.max_attempts < 1:
        problems.append("max_attempts must be at least 1")

    known = {channel.value for channel in OtpChannel}
    if not command.allowed_channels:
        problems.append("allowed_channels must not be empty")
    for channel in command.allowed_channels:
        if channel not in known:
            problems.append(f"Unknown channel '{channel}'")
    if command.default_channel not in command.allowed_channels:
        problems.append("default_channel must be one of allowed_channels")
    if not 1 <= command.smtp_port <= 65535:
        problems.append("smtp_port must be between 1 and 65535")
    return problems


class GetOtpPolicyAdminUseCase:
    """
    Use case for reading the full OTP policy of the caller's company.

    Business Rules:
    - Defaults are returned (is_default=True) when nothing is stored
    - The SMTP password is never returned
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, company_id: UUID) -> Result[OtpPolicyResponse]:
        async with self.uow:
            policy = await self.uow.otp_policies.get_by_company_id(company_id)
            if policy is None:
                return Return.ok(
                    to_policy_response(CompanyOtpPolicy.default_for(company_id), is_default=True)
                )
            return Return.ok(to_policy_response(policy, is_default=False))


class UpdateOtpPolicyUseCase:
    """
    Use case for replacing the OTP policy of the caller's company.

    Business Rules:
    - Only admin or super_admin
    - otp_length in (4, 6, 8), expiry >= 60 s, max_attempts >= 1
    - allowed_channels non-empty, known, and containing default_channel
    - Omitted smtp_password keeps the stored one
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, command: UpdateOtpPolicyCommand) -> Result[OtpPolicyResponse]:
        if command.role not in [AppRole.admin.value, AppRole.super_admin.value]:
            return Return.err(
                Error("INSUFFICIENT_ROLE", "Only admins can change the OTP policy")
            )

        problems = _policy_problems(command)
        if problems:
            return Return.err(
                Error("INVALID_OTP_POLICY", "OTP policy is invalid", {"problems": problems})
            )

        async with self.uow:
            policy = await self.uow.otp_policies.get_by_company_id(command.company_id)
            if policy is None:
                policy = CompanyOtpPolicy.default_for(command.company_id)

            fields = command.model_dump(exclude={"company_id", "user_id", "role", "smtp_password"})
            for name, value in fields.items():
                setattr(policy, name, value)
            if command.smtp_password is not None:
                policy.smtp_password = command.smtp_password
            policy.updated_at = utcnow()

            policy = await self.uow.otp_policies.save(policy)

            audit = AuditEvent(
                company_id=command.company_id,
                user_id=command.user_id,
                action="otp_policy_updated",
                event_metadata={
                    "otp_length": policy.otp_length,
                    "otp_expiration_seconds": policy.otp_expiration_seconds,
                    "max_attempts": policy.max_attempts,
                    "default_channel": policy.default_channel,
                    "allowed_channels": list(policy.allowed_channels),
                    "whatsapp_otp_enabled": policy.whatsapp_otp_enabled,
                },
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            return Return.ok(to_policy_response(policy, is_default=False))
