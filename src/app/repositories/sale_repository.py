from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Sale


class ISaleRepository(ABC):
    """Sale repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, sale_id: UUID) -> Optional[Sale]:
        """Get sale by ID, any company"""
        pass

    @abstractmethod
    async def get_for_company(self, sale_id: UUID, company_id: UUID) -> Optional[Sale]:
        """Get sale by ID scoped to a company"""
        pass

    @abstractmethod
    async def list_by_company(self, company_id: UUID) -> List[Sale]:
        """All sales of a company, newest first"""
        pass

    @abstractmethod
    async def update(self, sale: Sale) -> Sale:
        """Update existing sale"""
        pass
