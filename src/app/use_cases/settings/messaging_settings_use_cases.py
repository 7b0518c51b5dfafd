"""
Messaging Settings Use Cases

Admin read / update of the company's WhatsApp provider configuration.
"""

from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import AppRole, AuditEvent, CompanyMessagingSettings, WhatsAppProvider
from src.libs.result import Error, Result, Return
from .dtos import MessagingSettingsResponse, UpdateMessagingSettingsCommand, mask_secret

SECRET_FIELDS = ("whatsapp_api_key", "twilio_auth_token", "gateway_api_key")


def to_settings_response(
    settings: CompanyMessagingSettings, is_default: bool
) -> MessagingSettingsResponse:
    return MessagingSettingsResponse(
        is_default=is_default,
        whatsapp_provider=WhatsAppProvider(settings.whatsapp_provider).value,
        whatsapp_api_key=mask_secret(settings.whatsapp_api_key),
        whatsapp_phone_id=settings.whatsapp_phone_id,
        twilio_account_sid=settings.twilio_account_sid,
        twilio_auth_token=mask_secret(settings.twilio_auth_token),
        twilio_whatsapp_from=settings.twilio_whatsapp_from,
        gateway_url=settings.gateway_url,
        gateway_api_key=mask_secret(settings.gateway_api_key),
        updated_at=None if is_default else settings.updated_at,
    )


class GetMessagingSettingsUseCase:
    """
    Use case for reading messaging settings.

    Business Rules:
    - Only admin or super_admin
    - Secrets are masked
    - Companies without settings get manual (wa.me) mode
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, company_id: UUID, role: str) -> Result[MessagingSettingsResponse]:
        if role not in [AppRole.admin.value, AppRole.super_admin.value]:
            return Return.err(
                Error("INSUFFICIENT_ROLE", "Only admins can view messaging settings")
            )

        async with self.uow:
            settings = await self.uow.messaging_settings.get_by_company_id(company_id)
            if settings is None:
                return Return.ok(
                    to_settings_response(
                        CompanyMessagingSettings(company_id=company_id), is_default=True
                    )
                )
            return Return.ok(to_settings_response(settings, is_default=False))


class UpdateMessagingSettingsUseCase:
    """
    Use case for replacing messaging settings.

    Business Rules:
    - Only admin or super_admin
    - whatsapp_provider must be meta, twilio, gateway or wame
    - Omitted secrets keep their stored values
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, command: UpdateMessagingSettingsCommand
    ) -> Result[MessagingSettingsResponse]:
        if command.role not in [AppRole.admin.value, AppRole.super_admin.value]:
            return Return.err(
                Error("INSUFFICIENT_ROLE", "Only admins can change messaging settings")
            )

        try:
            provider = WhatsAppProvider(command.whatsapp_provider)
        except ValueError:
            return Return.err(
                Error(
                    "INVALID_PROVIDER",
                    f"Invalid WhatsApp provider: {command.whatsapp_provider}. "
                    "Must be one of: meta, twilio, gateway, wame",
                )
            )

        async with self.uow:
            settings = await self.uow.messaging_settings.get_by_company_id(command.company_id)
            if settings is None:
                settings = CompanyMessagingSettings(company_id=command.company_id)

            settings.whatsapp_provider = provider
            fields = command.model_dump(
                exclude={"company_id", "user_id", "role", "whatsapp_provider"}
            )
            for name, value in fields.items():
                if name in SECRET_FIELDS and value is None:
                    continue
                setattr(settings, name, value)
            settings.updated_at = utcnow()

            settings = await self.uow.messaging_settings.save(settings)

            audit = AuditEvent(
                company_id=command.company_id,
                user_id=command.user_id,
                action="messaging_settings_updated",
                event_metadata={"whatsapp_provider": provider.value},
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            return Return.ok(to_settings_response(settings, is_default=False))
