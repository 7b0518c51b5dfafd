from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.workflow_config_repository import IWorkflowConfigRepository
from src.domain.entities import CompanyWorkflowConfig


class WorkflowConfigRepository(IWorkflowConfigRepository):
    """CompanyWorkflowConfig repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_company_id(self, company_id: UUID) -> Optional[CompanyWorkflowConfig]:
        stmt = select(CompanyWorkflowConfig).where(CompanyWorkflowConfig.company_id == company_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def save(self, config: CompanyWorkflowConfig) -> CompanyWorkflowConfig:
        self.session.add(config)
        await self.session.flush()
        await self.session.refresh(config)
        return config
