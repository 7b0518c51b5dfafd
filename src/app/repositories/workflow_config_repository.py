from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import CompanyWorkflowConfig


class IWorkflowConfigRepository(ABC):
    """CompanyWorkflowConfig repository interface - application layer"""

    @abstractmethod
    async def get_by_company_id(self, company_id: UUID) -> Optional[CompanyWorkflowConfig]:
        """Get the stored workflow configuration of a company"""
        pass

    @abstractmethod
    async def save(self, config: CompanyWorkflowConfig) -> CompanyWorkflowConfig:
        """Insert or update the workflow configuration"""
        pass
