"""
Unit tests for Upsert Workflow Config Use Case
"""

import pytest
from unittest.mock import AsyncMock
from uuid import uuid4

from src.app.use_cases.workflow import GetWorkflowConfigUseCase, UpsertWorkflowConfigUseCase
from src.app.use_cases.workflow.dtos import UpsertWorkflowConfigCommand
from src.domain.entities import CompanyWorkflowConfig

TRANSITION = {"id": "t1", "from": "borrador", "to": "en_auditoria", "allowed_roles": ["vendedor"]}


@pytest.fixture
def workflow_uow(mock_uow):
    mock_uow.workflow_configs.get_by_company_id = AsyncMock(return_value=None)
    mock_uow.workflow_configs.save = AsyncMock(side_effect=lambda row: row)
    mock_uow.audit_events.create = AsyncMock()
    return mock_uow


def make_command(role="admin", transitions=None, state_access=None, is_active=True):
    return UpsertWorkflowConfigCommand(
        company_id=uuid4(),
        user_id=uuid4(),
        role=role,
        transitions=[TRANSITION] if transitions is None else transitions,
        state_access=state_access or [],
        is_active=is_active,
    )


@pytest.mark.asyncio
async def test_upsert_creates_config(workflow_uow):
    command = make_command()

    result = await UpsertWorkflowConfigUseCase(workflow_uow).execute(command)

    assert result.is_ok()
    assert result.value.is_active is True
    assert result.value.is_default is False
    row = workflow_uow.workflow_configs.save.call_args[0][0]
    assert row.company_id == command.company_id
    assert row.updated_by == command.user_id
    assert row.workflow_config["transitions"][0]["from"] == "borrador"
    workflow_uow.audit_events.create.assert_called_once()
    workflow_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_upsert_updates_existing_row(workflow_uow):
    existing = CompanyWorkflowConfig(company_id=uuid4(), workflow_config={}, is_active=False)
    workflow_uow.workflow_configs.get_by_company_id = AsyncMock(return_value=existing)

    await UpsertWorkflowConfigUseCase(workflow_uow).execute(make_command())

    assert workflow_uow.workflow_configs.save.call_args[0][0] is existing
    assert existing.is_active is True


@pytest.mark.asyncio
async def test_upsert_requires_admin(workflow_uow):
    result = await UpsertWorkflowConfigUseCase(workflow_uow).execute(make_command(role="vendedor"))

    assert result.error.code == "INSUFFICIENT_ROLE"
    workflow_uow.workflow_configs.save.assert_not_called()


@pytest.mark.asyncio
async def test_upsert_rejects_self_loop_and_unknown_role(workflow_uow):
    result = await UpsertWorkflowConfigUseCase(workflow_uow).execute(
        make_command(
            transitions=[
                {"id": "a", "from": "x", "to": "x", "allowed_roles": ["admin"]},
                {"id": "b", "from": "x", "to": "y", "allowed_roles": ["ceo"]},
            ]
        )
    )

    assert result.error.code == "INVALID_WORKFLOW_CONFIG"
    assert len(result.error.details["problems"]) >= 2
    workflow_uow.workflow_configs.save.assert_not_called()


@pytest.mark.asyncio
async def test_upsert_rejects_editable_not_visible(workflow_uow):
    result = await UpsertWorkflowConfigUseCase(workflow_uow).execute(
        make_command(
            state_access=[{"state": "borrador", "visible_to": ["admin"], "editable_by": ["vendedor"]}]
        )
    )

    assert result.error.code == "INVALID_WORKFLOW_CONFIG"
    assert "vendedor" in result.error.details["problems"][0]


@pytest.mark.asyncio
async def test_get_config_returns_default_when_missing(workflow_uow):
    result = await GetWorkflowConfigUseCase(workflow_uow).execute(uuid4())

    assert result.value.is_default is True
    assert result.value.is_active is False
    assert len(result.value.transitions) == 9
    assert {c.key for c in result.value.built_in_conditions} >= {"has_client", "audit_approved"}
