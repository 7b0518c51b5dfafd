from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import NotificationMessage


class INotificationMessageRepository(ABC):
    """NotificationMessage repository interface - application layer"""

    @abstractmethod
    async def create(self, message: NotificationMessage) -> NotificationMessage:
        """Log a notification (immutable)"""
        pass

    @abstractmethod
    async def list_by_company(
        self, company_id: UUID, sale_id: Optional[UUID] = None, limit: int = 100
    ) -> List[NotificationMessage]:
        """Notification history, newest first, optionally for one sale"""
        pass
