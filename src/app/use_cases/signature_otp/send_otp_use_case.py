"""
Send OTP Use Case

Issues a one-time code for a signature link and delivers it through the
company's configured channel, falling back to e-mail.
"""

import logging
from datetime import timedelta

import httpx

from src.adapter.messaging.factory import build_email_sender, build_whatsapp_provider
from src.app.services.channel_dispatcher import ChannelDispatcher, DispatchOutcome, DispatchRequest
from src.app.services.message_templates import render_otp_email, render_otp_whatsapp
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import isoformat_z, utcnow
from src.domain.entities import (
    AuditEvent,
    AuthMethod,
    CompanyOtpPolicy,
    OtpChannel,
    SignatureIdentityVerification,
    VerificationResult,
)
from src.domain.otp import generate_otp, hash_otp, mask_email, mask_phone
from src.libs.result import Error, Result, Return
from .dtos import SendOtpCommand, SendOtpResponse, parse_ids

logger = logging.getLogger(__name__)


class SendOtpUseCase:
    """
    Use case for sending a signature OTP.

    Business Rules:
    - signature_link_id and sale_id are required, plus an e-mail or phone
    - Channel defaults to the policy default and must be in allowed_channels
    - Code length, expiry and max attempts come from the company policy
      (defaults when the company has none)
    - Only the SHA-256 hash of the code is stored
    - Delivery failure is not an error: the record is stored as
      send_failed and the response carries sent=False plus the reason
    - A successfully sent code supersedes older pending codes of the link
    """

    def __init__(self, uow: UnitOfWork, http_client: httpx.AsyncClient):
        self.uow = uow
        self.http_client = http_client

    async def execute(self, command: SendOtpCommand) -> Result[SendOtpResponse]:
        """
        Execute send OTP use case.

        Args:
            command: Send request from the signer page

        Returns:
            Result with delivery summary, or Error

        Errors:
            - MISSING_FIELDS: Required identifiers or destination missing
            - INVALID_FIELDS: Identifiers are not valid UUIDs
            - INVALID_CHANNEL: Unknown channel name
            - CHANNEL_NOT_ALLOWED: Channel not enabled by company policy
            - SALE_NOT_FOUND: Sale does not exist
        """
        missing = [name for name in ("signature_link_id", "sale_id") if not getattr(command, name)]
        if missing:
            return Return.err(
                Error("MISSING_FIELDS", f"Missing required fields: {', '.join(missing)}")
            )
        if not command.recipient_email and not command.recipient_phone:
            return Return.err(
                Error("MISSING_FIELDS", "recipient_email or recipient_phone is required")
            )
        ids, invalid = parse_ids(
            {"signature_link_id": command.signature_link_id, "sale_id": command.sale_id}
        )
        if invalid:
            return Return.err(
                Error(
                    "INVALID_FIELDS",
                    f"Invalid identifiers: {', '.join(invalid)}",
                    {"invalid_fields": invalid},
                )
            )
        link_id = ids["signature_link_id"]

        async with self.uow:
            sale = await self.uow.sales.get_by_id(ids["sale_id"])
            if sale is None:
                return Return.err(Error("SALE_NOT_FOUND", "Sale not found"))

            policy = await self.uow.otp_policies.get_by_company_id(sale.company_id)
            if policy is None:
                policy = CompanyOtpPolicy.default_for(sale.company_id)

            channel = (command.channel or policy.default_channel).strip().lower()
            try:
                OtpChannel(channel)
            except ValueError:
                return Return.err(Error("INVALID_CHANNEL", f"Invalid channel: {channel}"))

            if channel not in policy.allowed_channels:
                return Return.err(
                    Error(
                        "CHANNEL_NOT_ALLOWED",
                        f"Channel '{channel}' is not allowed by the company OTP policy",
                    )
                )

            if channel != OtpChannel.whatsapp.value and not command.recipient_email:
                return Return.err(
                    Error("MISSING_FIELDS", f"recipient_email is required for the {channel} channel")
                )

            settings = await self.uow.messaging_settings.get_by_company_id(sale.company_id)
            # end the read transaction before calling out to providers
            await self.uow.commit()

            dispatcher = ChannelDispatcher(
                email_sender=build_email_sender(policy, self.http_client),
                whatsapp_provider=build_whatsapp_provider(settings, self.http_client),
            )

            otp = generate_otp(policy.otp_length)
            now = utcnow()
            expires_at = now + timedelta(seconds=policy.otp_expiration_seconds)
            subject, html, text = render_otp_email(otp, policy.otp_expiration_seconds)

            outcome = await dispatcher.dispatch(
                DispatchRequest(
                    channel=channel,
                    recipient_email=command.recipient_email,
                    recipient_phone=command.recipient_phone,
                    email_subject=subject,
                    email_html=html,
                    email_text=text,
                    whatsapp_body=render_otp_whatsapp(otp, policy.otp_expiration_seconds),
                    whatsapp_enabled=policy.whatsapp_otp_enabled,
                )
            )

            via_whatsapp = outcome.channel_used == OtpChannel.whatsapp.value
            verification = SignatureIdentityVerification(
                signature_link_id=link_id,
                sale_id=sale.id,
                auth_method=AuthMethod.OTP_WHATSAPP if via_whatsapp else AuthMethod.OTP_EMAIL,
                channel_used=outcome.channel_used,
                provider_used=outcome.provider_used,
                destination_masked=self._masked_destination(outcome, command),
                otp_code_hash=hash_otp(otp),
                expires_at=expires_at,
                max_attempts=policy.max_attempts,
                attempts=0,
                result=VerificationResult.pending if outcome.sent else VerificationResult.send_failed,
                ip_address=command.ip_address,
                user_agent=command.user_agent,
                created_at=now,
            )
            await self.uow.verifications.create(verification)

            superseded = 0
            if outcome.sent:
                superseded = await self.uow.verifications.supersede_pending(
                    link_id, verification.id
                )
            else:
                logger.warning(
                    f"OTP for signature link {command.signature_link_id} not delivered: "
                    f"{outcome.fallback_reason}"
                )

            audit = AuditEvent(
                company_id=sale.company_id,
                user_id=None,  # signer-initiated
                action="signature_otp_sent",
                event_metadata={
                    "sale_id": str(sale.id),
                    "signature_link_id": str(link_id),
                    "verification_id": str(verification.id),
                    "attempted_channel": outcome.attempted_channel,
                    "channel_used": outcome.channel_used,
                    "provider_used": outcome.provider_used,
                    "sent": outcome.sent,
                    "fallback_used": outcome.fallback_used,
                    "superseded": superseded,
                    "ip_address": command.ip_address,
                },
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            return Return.ok(
                SendOtpResponse(
                    verification_id=str(verification.id),
                    destination_masked=verification.destination_masked,
                    expires_at=isoformat_z(expires_at),
                    attempted_channel=outcome.attempted_channel,
                    channel_used=outcome.channel_used,
                    sent=outcome.sent,
                    fallback_used=outcome.fallback_used,
                    fallback_reason=outcome.fallback_reason,
                    provider_used=outcome.provider_used,
                )
            )

    @staticmethod
    def _masked_destination(outcome: DispatchOutcome, command: SendOtpCommand) -> str:
        if outcome.channel_used == OtpChannel.whatsapp.value:
            return mask_phone(outcome.destination or command.recipient_phone or "")
        if outcome.destination or command.recipient_email:
            return mask_email(outcome.destination or command.recipient_email)
        return mask_phone(command.recipient_phone or "")
