"""
Verify OTP Use Case

Checks a signer-submitted code against the latest pending verification
of a signature link.
"""

import logging

from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import AuditEvent, VerificationResult
from src.domain.otp import otp_matches
from src.libs.result import Error, Result, Return
from .dtos import VerifyOtpCommand, VerifyOtpResponse, parse_ids

logger = logging.getLogger(__name__)


class VerifyOtpUseCase:
    """
    Use case for verifying a signature OTP.

    Business Rules:
    - Only the newest pending record of the link is considered
    - An expired record is closed as expired, no attempt is charged
    - An exhausted record is closed as max_attempts_exceeded
    - Each comparison consumes one attempt, counted atomically
    - The requester IP and user agent are recorded on every call
    - On mismatch the remaining attempts are reported
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, command: VerifyOtpCommand) -> Result[VerifyOtpResponse]:
        """
        Execute verify OTP use case.

        Args:
            command: Verify request from the signer page

        Returns:
            Result with verification id, or Error

        Errors:
            - MISSING_FIELDS: signature_link_id or otp_code missing
            - INVALID_FIELDS: signature_link_id is not a valid UUID
            - NO_PENDING_VERIFICATION: Nothing to verify for the link
            - OTP_EXPIRED: Code past its expiry (details.expired=True)
            - MAX_ATTEMPTS_EXCEEDED: No attempts left
            - INVALID_OTP: Wrong code (details.attempts_remaining)
        """
        if not command.signature_link_id:
            return Return.err(Error("MISSING_FIELDS", "Missing required fields: signature_link_id"))
        if not command.otp_code:
            return Return.err(Error("MISSING_FIELDS", "OTP code is required"))
        ids, invalid = parse_ids({"signature_link_id": command.signature_link_id})
        if invalid:
            return Return.err(
                Error(
                    "INVALID_FIELDS",
                    "Invalid identifiers: signature_link_id",
                    {"invalid_fields": invalid},
                )
            )
        link_id = ids["signature_link_id"]

        async with self.uow:
            verification = await self.uow.verifications.get_latest_pending(link_id)
            if verification is None:
                return Return.err(
                    Error("NO_PENDING_VERIFICATION", "No pending verification found")
                )

            now = utcnow()
            if now > verification.expires_at:
                await self.uow.verifications.mark_result(
                    verification.id, VerificationResult.expired
                )
                await self.uow.verifications.record_client(
                    verification.id, command.ip_address, command.user_agent
                )
                await self.uow.commit()
                return Return.err(
                    Error("OTP_EXPIRED", "OTP has expired", {"expired": True})
                )

            if verification.attempts >= verification.max_attempts:
                return await self._close_exhausted(verification.id, command)

            attempts = await self.uow.verifications.register_attempt(
                verification.id, command.ip_address, command.user_agent
            )
            if attempts is None:
                # Another request consumed the last attempt
                return await self._close_exhausted(verification.id, command)

            if otp_matches(command.otp_code.strip(), verification.otp_code_hash):
                closed = await self.uow.verifications.mark_result(
                    verification.id, VerificationResult.verified, verified_at=now
                )
                if not closed:
                    await self.uow.commit()
                    return Return.err(
                        Error("NO_PENDING_VERIFICATION", "No pending verification found")
                    )

                sale = await self.uow.sales.get_by_id(verification.sale_id)
                if sale is not None:
                    audit = AuditEvent(
                        company_id=sale.company_id,
                        user_id=None,
                        action="signature_otp_verified",
                        event_metadata={
                            "sale_id": str(sale.id),
                            "signature_link_id": str(link_id),
                            "verification_id": str(verification.id),
                            "attempts": attempts,
                            "ip_address": command.ip_address,
                            "user_agent": command.user_agent,
                        },
                    )
                    await self.uow.audit_events.create(audit)

                await self.uow.commit()
                logger.info(f"Signature link {link_id} verified")
                return Return.ok(VerifyOtpResponse(verification_id=str(verification.id)))

            await self.uow.commit()
            return Return.err(
                Error(
                    "INVALID_OTP",
                    "Invalid OTP code",
                    {"attempts_remaining": max(verification.max_attempts - attempts, 0)},
                )
            )

    async def _close_exhausted(self, verification_id, command: VerifyOtpCommand) -> Result:
        await self.uow.verifications.mark_result(
            verification_id, VerificationResult.max_attempts_exceeded
        )
        await self.uow.verifications.record_client(
            verification_id, command.ip_address, command.user_agent
        )
        await self.uow.commit()
        return Return.err(
            Error("MAX_ATTEMPTS_EXCEEDED", "Maximum verification attempts exceeded")
        )
