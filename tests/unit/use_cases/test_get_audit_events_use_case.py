"""
Unit tests for Get Audit Events Use Case
"""

import pytest
from unittest.mock import AsyncMock
from uuid import uuid4

from src.app.use_cases.audit import GetAuditEventsUseCase
from src.domain.entities import AuditEvent


@pytest.mark.asyncio
@pytest.mark.parametrize("role", ["super_admin", "admin", "auditor"])
async def test_get_audit_events_allowed_roles(mock_uow, role):
    company_id = uuid4()
    event = AuditEvent(
        company_id=company_id,
        action="sale_status_changed",
        event_metadata={"from": "borrador", "to": "en_auditoria"},
    )
    mock_uow.audit_events.get_by_company_paginated = AsyncMock(return_value=([event], "next"))

    result = await GetAuditEventsUseCase(mock_uow).execute(company_id, role, limit=10)

    assert result.is_ok()
    assert result.value["next_cursor"] == "next"
    assert result.value["events"][0]["action"] == "sale_status_changed"
    assert result.value["events"][0]["user_id"] is None
    assert result.value["events"][0]["timestamp"].endswith("Z")
    mock_uow.audit_events.get_by_company_paginated.assert_called_once_with(
        company_id, limit=10, cursor=None, action=None
    )


@pytest.mark.asyncio
async def test_get_audit_events_forbidden_for_sellers(mock_uow):
    result = await GetAuditEventsUseCase(mock_uow).execute(uuid4(), "vendedor")

    assert result.error.code == "INSUFFICIENT_ROLE"
