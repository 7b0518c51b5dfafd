"""
Unit tests for Change Sale Status Use Case
"""

import pytest
from unittest.mock import AsyncMock
from uuid import uuid4

from src.app.use_cases.sales import ChangeSaleStatusUseCase
from src.app.use_cases.sales.dtos import ChangeSaleStatusCommand
from src.domain.entities import CompanyWorkflowConfig, Sale

WORKFLOW = {
    "transitions": [
        {
            "id": "t1",
            "from": "borrador",
            "to": "en_auditoria",
            "allowed_roles": ["vendedor"],
            "conditions": [
                {"id": "c1", "type": "built_in", "built_in_key": "has_client", "label": "Cliente asignado"},
                {"id": "c2", "type": "custom", "label": "Llamada de bienvenida"},
            ],
        },
        {
            "id": "t2",
            "from": "borrador",
            "to": "cancelado",
            "allowed_roles": ["vendedor", "admin"],
            "require_note": True,
        },
    ],
    "state_access": [],
}


@pytest.fixture
def company_id():
    return uuid4()


@pytest.fixture
def sale(company_id):
    return Sale(id=uuid4(), company_id=company_id, status="borrador", client_id=uuid4())


@pytest.fixture
def sales_uow(mock_uow, sale, company_id):
    mock_uow.sales.get_for_company = AsyncMock(return_value=sale)
    mock_uow.sales.update = AsyncMock(side_effect=lambda s: s)
    mock_uow.workflow_configs.get_by_company_id = AsyncMock(
        return_value=CompanyWorkflowConfig(
            company_id=company_id, workflow_config=WORKFLOW, is_active=True
        )
    )
    mock_uow.audit_events.create = AsyncMock()
    return mock_uow


def make_command(sale, role="vendedor", to_state="en_auditoria", **overrides):
    return ChangeSaleStatusCommand(
        company_id=sale.company_id,
        user_id=uuid4(),
        role=role,
        sale_id=sale.id,
        to_state=to_state,
        **overrides,
    )


@pytest.mark.asyncio
async def test_change_status_success(sales_uow, sale):
    # Arrange
    command = make_command(sale, custom_conditions_met={"c2": True})

    # Act
    result = await ChangeSaleStatusUseCase(sales_uow).execute(command)

    # Assert
    assert result.is_ok()
    assert result.value.from_state == "borrador"
    assert result.value.to_state == "en_auditoria"
    assert result.value.status_label == "En Auditoría"
    assert sale.status == "en_auditoria"
    sales_uow.sales.update.assert_called_once_with(sale)

    audit = sales_uow.audit_events.create.call_args[0][0]
    assert audit.action == "sale_status_changed"
    assert audit.event_metadata["from"] == "borrador"
    assert audit.event_metadata["to"] == "en_auditoria"
    sales_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_change_status_conditions_not_met(sales_uow, sale):
    sale.client_id = None

    result = await ChangeSaleStatusUseCase(sales_uow).execute(make_command(sale))

    assert result.error.code == "CONDITIONS_NOT_MET"
    assert [c["id"] for c in result.error.details["unmet_conditions"]] == ["c1", "c2"]
    assert sale.status == "borrador"
    sales_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_change_status_role_not_allowed(sales_uow, sale):
    result = await ChangeSaleStatusUseCase(sales_uow).execute(make_command(sale, role="auditor"))

    assert result.error.code == "ROLE_NOT_ALLOWED"
    sales_uow.sales.update.assert_not_called()


@pytest.mark.asyncio
async def test_change_status_note_required(sales_uow, sale):
    result = await ChangeSaleStatusUseCase(sales_uow).execute(
        make_command(sale, role="admin", to_state="cancelado")
    )

    assert result.error.code == "NOTE_REQUIRED"


@pytest.mark.asyncio
async def test_change_status_with_note(sales_uow, sale):
    result = await ChangeSaleStatusUseCase(sales_uow).execute(
        make_command(sale, role="admin", to_state="cancelado", note="Cliente desistió")
    )

    assert result.is_ok()
    audit = sales_uow.audit_events.create.call_args[0][0]
    assert audit.event_metadata["note"] == "Cliente desistió"


@pytest.mark.asyncio
async def test_change_status_not_configured(sales_uow, sale):
    result = await ChangeSaleStatusUseCase(sales_uow).execute(make_command(sale, to_state="completado"))

    assert result.error.code == "TRANSITION_NOT_CONFIGURED"


@pytest.mark.asyncio
async def test_change_status_without_workflow_is_permissive(sales_uow, sale):
    sales_uow.workflow_configs.get_by_company_id = AsyncMock(return_value=None)

    result = await ChangeSaleStatusUseCase(sales_uow).execute(
        make_command(sale, role="financiero", to_state="completado")
    )

    assert result.is_ok()
    assert sale.status == "completado"


@pytest.mark.asyncio
async def test_change_status_same_status(sales_uow, sale):
    result = await ChangeSaleStatusUseCase(sales_uow).execute(make_command(sale, to_state="borrador"))

    assert result.error.code == "SAME_STATUS"


@pytest.mark.asyncio
async def test_change_status_sale_not_found(sales_uow, sale):
    sales_uow.sales.get_for_company = AsyncMock(return_value=None)

    result = await ChangeSaleStatusUseCase(sales_uow).execute(make_command(sale))

    assert result.error.code == "SALE_NOT_FOUND"


@pytest.mark.asyncio
async def test_change_status_corrupt_config(sales_uow, sale, company_id):
    sales_uow.workflow_configs.get_by_company_id = AsyncMock(
        return_value=CompanyWorkflowConfig(
            company_id=company_id,
            workflow_config={"transitions": [{"id": "x", "from": "a"}]},
            is_active=True,
        )
    )

    result = await ChangeSaleStatusUseCase(sales_uow).execute(make_command(sale))

    assert result.error.code == "WORKFLOW_CONFIG_CORRUPT"
