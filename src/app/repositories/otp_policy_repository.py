from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import CompanyOtpPolicy


class IOtpPolicyRepository(ABC):
    """CompanyOtpPolicy repository interface - application layer"""

    @abstractmethod
    async def get_by_company_id(self, company_id: UUID) -> Optional[CompanyOtpPolicy]:
        """Get the OTP policy of a company"""
        pass

    @abstractmethod
    async def save(self, policy: CompanyOtpPolicy) -> CompanyOtpPolicy:
        """Insert or update the OTP policy"""
        pass
