"""
List Notifications Use Case
"""

from typing import Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import NotificationStatus
from src.libs.result import Result, Return
from .dtos import NotificationListResponse, NotificationMessageView


class ListNotificationsUseCase:
    """Notification history of the caller's company, newest first"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, company_id: UUID, sale_id: Optional[UUID] = None, limit: int = 100
    ) -> Result[NotificationListResponse]:
        limit = min(max(limit, 1), 500)
        async with self.uow:
            messages = await self.uow.notifications.list_by_company(
                company_id, sale_id=sale_id, limit=limit
            )
            return Return.ok(
                NotificationListResponse(
                    messages=[
                        NotificationMessageView(
                            id=message.id,
                            sale_id=message.sale_id,
                            message_type=message.message_type,
                            attempted_channel=message.attempted_channel,
                            channel_used=message.channel_used,
                            provider_used=message.provider_used,
                            destination=message.destination,
                            status=NotificationStatus(message.status).value,
                            error_message=message.error_message,
                            sent_at=message.sent_at,
                            created_at=message.created_at,
                        )
                        for message in messages
                    ]
                )
            )
