from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.messaging_settings_repository import IMessagingSettingsRepository
from src.domain.entities import CompanyMessagingSettings


class MessagingSettingsRepository(IMessagingSettingsRepository):
    """CompanyMessagingSettings repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_company_id(self, company_id: UUID) -> Optional[CompanyMessagingSettings]:
        stmt = select(CompanyMessagingSettings).where(
            CompanyMessagingSettings.company_id == company_id
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def save(self, settings: CompanyMessagingSettings) -> CompanyMessagingSettings:
        self.session.add(settings)
        await self.session.flush()
        await self.session.refresh(settings)
        return settings
