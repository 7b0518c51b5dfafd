from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import CompanyMessagingSettings


class IMessagingSettingsRepository(ABC):
    """CompanyMessagingSettings repository interface - application layer"""

    @abstractmethod
    async def get_by_company_id(self, company_id: UUID) -> Optional[CompanyMessagingSettings]:
        """Get the messaging settings of a company"""
        pass

    @abstractmethod
    async def save(self, settings: CompanyMessagingSettings) -> CompanyMessagingSettings:
        """Insert or update messaging settings"""
        pass
