from typing import List, Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.sale_repository import ISaleRepository
from src.domain.entities import Sale


class SaleRepository(ISaleRepository):
    """Sale repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, sale_id: UUID) -> Optional[Sale]:
        stmt = select(Sale).where(Sale.id == sale_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_for_company(self, sale_id: UUID, company_id: UUID) -> Optional[Sale]:
        stmt = select(Sale).where(Sale.id == sale_id, Sale.company_id == company_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def list_by_company(self, company_id: UUID) -> List[Sale]:
        stmt = (
            select(Sale)
            .where(Sale.company_id == company_id)
            .order_by(Sale.created_at.desc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def update(self, sale: Sale) -> Sale:
        self.session.add(sale)
        await self.session.flush()
        await self.session.refresh(sale)
        return sale
