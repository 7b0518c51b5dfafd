"""
Get Audit Events Use Case

Retrieves business audit events for a company with pagination.
"""

from typing import Any, Dict, Optional

from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AppRole
from src.libs.result import Error, Result, Return


class GetAuditEventsUseCase:
    """
    Use case for retrieving audit events for a company.

    Business Rules:
    - Caller must have role super_admin, admin or auditor
    - Results are company-scoped (only events for the company)
    - Results ordered by newest first
    - Supports cursor-based pagination
    - Optional filter on action name
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        company_id: UUID,
        role: str,
        limit: int = 50,
        cursor: Optional[str] = None,
        action: Optional[str] = None,
    ) -> Result[Dict[str, Any]]:
        """
        Execute get audit events use case.

        Args:
            company_id: Company UUID from JWT
            role: Role from JWT
            limit: Maximum number of events to return
            cursor: Pagination cursor (optional)
            action: Only events with this action (optional)

        Returns:
            Result with events list and next_cursor, or Error
        """
        if role not in [AppRole.super_admin.value, AppRole.admin.value, AppRole.auditor.value]:
            return Return.err(
                Error(
                    "INSUFFICIENT_ROLE",
                    "You do not have permission to view audit events",
                )
            )

        async with self.uow:
            events, next_cursor = await self.uow.audit_events.get_by_company_paginated(
                company_id, limit=limit, cursor=cursor, action=action
            )

            events_list = [
                {
                    "id": str(event.id),
                    "action": event.action,
                    "user_id": str(event.user_id) if event.user_id else None,
                    "timestamp": event.created_at.isoformat() + "Z",
                    "metadata": event.event_metadata or {},
                }
                for event in events
            ]

            return Return.ok({"events": events_list, "next_cursor": next_cursor})
