"""
Send Notification Use Case

Delivers a templated message (signature link, reminder, approval...)
through the same channel dispatcher used for OTPs.
"""

import logging

import httpx

from src.adapter.messaging.factory import build_email_sender, build_whatsapp_provider
from src.app.services.channel_dispatcher import ChannelDispatcher, DispatchRequest
from src.app.services.message_templates import render_notification
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import (
    CompanyOtpPolicy,
    NotificationMessage,
    NotificationStatus,
    OtpChannel,
)
from src.libs.result import Error, Result, Return
from .dtos import SendNotificationCommand, SendNotificationResponse

logger = logging.getLogger(__name__)


class SendNotificationUseCase:
    """
    Use case for sending a client notification.

    Business Rules:
    - Channel is whatsapp or email; WhatsApp falls back to e-mail
    - At least one destination matching the channel is required
    - When a sale is given it must belong to the caller's company
    - companyName defaults to the company name
    - Every dispatch is logged, delivered or not
    """

    def __init__(self, uow: UnitOfWork, http_client: httpx.AsyncClient):
        self.uow = uow
        self.http_client = http_client

    async def execute(self, command: SendNotificationCommand) -> Result[SendNotificationResponse]:
        channel = command.channel.strip().lower()
        if channel == OtpChannel.smtp.value:
            channel = OtpChannel.email.value
        if channel not in (OtpChannel.whatsapp.value, OtpChannel.email.value):
            return Return.err(Error("INVALID_CHANNEL", f"Invalid channel: {command.channel}"))

        if channel == OtpChannel.email.value and not command.recipient_email:
            return Return.err(
                Error("MISSING_FIELDS", "recipient_email is required for the email channel")
            )
        if not command.recipient_email and not command.recipient_phone:
            return Return.err(
                Error("MISSING_FIELDS", "recipient_email or recipient_phone is required")
            )

        async with self.uow:
            if command.sale_id is not None:
                sale = await self.uow.sales.get_for_company(command.sale_id, command.company_id)
                if sale is None:
                    return Return.err(Error("SALE_NOT_FOUND", "Sale not found"))

            policy = await self.uow.otp_policies.get_by_company_id(command.company_id)
            if policy is None:
                policy = CompanyOtpPolicy.default_for(command.company_id)
            settings = await self.uow.messaging_settings.get_by_company_id(command.company_id)
            company = await self.uow.companies.get_by_id(command.company_id)
            # end the read transaction before calling out to providers
            await self.uow.commit()

            dispatcher = ChannelDispatcher(
                email_sender=build_email_sender(policy, self.http_client),
                whatsapp_provider=build_whatsapp_provider(settings, self.http_client),
            )

            data = dict(command.template_data)
            if company is not None:
                data.setdefault("companyName", company.name)

            subject, html, text = render_notification(command.template_name, data)
            outcome = await dispatcher.dispatch(
                DispatchRequest(
                    channel=channel,
                    recipient_email=command.recipient_email,
                    recipient_phone=command.recipient_phone,
                    email_subject=subject,
                    email_html=html,
                    email_text=text,
                    whatsapp_body=text,
                )
            )

            message = NotificationMessage(
                company_id=command.company_id,
                sale_id=command.sale_id,
                message_type=command.template_name,
                attempted_channel=outcome.attempted_channel,
                channel_used=outcome.channel_used,
                provider_used=outcome.provider_used,
                destination=outcome.destination
                or command.recipient_phone
                or command.recipient_email,
                message_body=text,
                status=NotificationStatus.sent if outcome.sent else NotificationStatus.failed,
                error_message=None if outcome.sent else outcome.fallback_reason,
                provider_message_id=outcome.message_id,
                sent_by=command.user_id,
                sent_at=utcnow() if outcome.sent else None,
            )
            await self.uow.notifications.create(message)
            await self.uow.commit()

            if not outcome.sent:
                logger.warning(f"Notification {message.id} not delivered: {outcome.fallback_reason}")

            return Return.ok(
                SendNotificationResponse(
                    notification_id=str(message.id),
                    sent=outcome.sent,
                    attempted_channel=outcome.attempted_channel,
                    channel_used=outcome.channel_used,
                    fallback_used=outcome.fallback_used,
                    fallback_reason=outcome.fallback_reason,
                    provider_used=outcome.provider_used,
                    message_id=outcome.message_id,
                )
            )
