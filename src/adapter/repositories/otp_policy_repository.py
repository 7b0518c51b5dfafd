from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.otp_policy_repository import IOtpPolicyRepository
from src.domain.entities import CompanyOtpPolicy


class OtpPolicyRepository(IOtpPolicyRepository):
    """CompanyOtpPolicy repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_company_id(self, company_id: UUID) -> Optional[CompanyOtpPolicy]:
        stmt = select(CompanyOtpPolicy).where(CompanyOtpPolicy.company_id == company_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def save(self, policy: CompanyOtpPolicy) -> CompanyOtpPolicy:
        self.session.add(policy)
        await self.session.flush()
        await self.session.refresh(policy)
        return policy
