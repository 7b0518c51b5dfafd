import base64
import binascii
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.domain.entities import AuditEvent


def _decode_cursor(cursor: str) -> Optional[Tuple[datetime, UUID]]:
    try:
        created_at, event_id = base64.b64decode(cursor).decode("utf-8").split("|")
        return datetime.fromisoformat(created_at), UUID(event_id)
    except (ValueError, TypeError, binascii.Error):
        return None


def _encode_cursor(event: AuditEvent) -> str:
    raw = f"{event.created_at.isoformat()}|{event.id}"
    return base64.b64encode(raw.encode("utf-8")).decode("utf-8")


class AuditEventRepository(IAuditEventRepository):
    """AuditEvent repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        """Create a new audit event (immutable)"""
        self.session.add(audit_event)
        await self.session.flush()
        await self.session.refresh(audit_event)
        return audit_event

    async def get_by_company_paginated(
        self,
        company_id: UUID,
        limit: int = 50,
        cursor: Optional[str] = None,
        action: Optional[str] = None,
    ) -> Tuple[List[AuditEvent], Optional[str]]:
        """
        Get audit events for a company with cursor-based pagination.

        Cursor format: base64-encoded "<created_at ISO>|<id>" of the last
        event; the id breaks ties between events sharing a timestamp.
        An unreadable cursor restarts from the newest event.
        """
        stmt = select(AuditEvent).where(AuditEvent.company_id == company_id)
        if action:
            stmt = stmt.where(AuditEvent.action == action)

        if cursor:
            position = _decode_cursor(cursor)
            if position is not None:
                created_at, event_id = position
                stmt = stmt.where(
                    or_(
                        AuditEvent.created_at < created_at,
                        and_(AuditEvent.created_at == created_at, AuditEvent.id < event_id),
                    )
                )

        # One extra row tells whether another page exists
        stmt = stmt.order_by(AuditEvent.created_at.desc(), AuditEvent.id.desc()).limit(limit + 1)
        result = await self.session.exec(stmt)
        events = list(result.all())

        next_cursor = None
        if len(events) > limit:
            events = events[:limit]
            next_cursor = _encode_cursor(events[-1])

        return events, next_cursor
