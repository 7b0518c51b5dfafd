from typing import List, Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.notification_message_repository import INotificationMessageRepository
from src.domain.entities import NotificationMessage


class NotificationMessageRepository(INotificationMessageRepository):
    """NotificationMessage repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, message: NotificationMessage) -> NotificationMessage:
        self.session.add(message)
        await self.session.flush()
        await self.session.refresh(message)
        return message

    async def list_by_company(
        self, company_id: UUID, sale_id: Optional[UUID] = None, limit: int = 100
    ) -> List[NotificationMessage]:
        stmt = select(NotificationMessage).where(NotificationMessage.company_id == company_id)
        if sale_id is not None:
            stmt = stmt.where(NotificationMessage.sale_id == sale_id)
        stmt = stmt.order_by(NotificationMessage.created_at.desc()).limit(limit)
        result = await self.session.exec(stmt)
        return list(result.all())
