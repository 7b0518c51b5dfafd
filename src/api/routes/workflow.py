"""
Workflow API Routes

Company workflow configuration and transition / state-access queries.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from src.api.error import raise_for_error
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.workflow import (
    CheckTransitionUseCase,
    GetAvailableTransitionsUseCase,
    GetStateAccessUseCase,
    GetWorkflowConfigUseCase,
    UpsertWorkflowConfigUseCase,
)
from src.app.use_cases.workflow.dtos import (
    AvailableTransitionsResponse,
    StateAccessResponse,
    TransitionCheckResponse,
    UpsertWorkflowConfigCommand,
    WorkflowConfigResponse,
)
from src.depends import get_current_user, get_unit_of_work

router = APIRouter(prefix="/workflow", tags=["Workflow"])

STATUS_BY_CODE = {
    "INSUFFICIENT_ROLE": status.HTTP_403_FORBIDDEN,
    "INVALID_WORKFLOW_CONFIG": status.HTTP_400_BAD_REQUEST,
}


class WorkflowConfigRequest(BaseModel):
    """PUT /workflow/config request payload"""

    transitions: List[Dict[str, Any]] = Field(default_factory=list)
    state_access: List[Dict[str, Any]] = Field(default_factory=list)
    is_active: bool = False


class TransitionCheckRequest(BaseModel):
    """POST /workflow/transitions/check request payload"""

    from_state: str
    to_state: str
    note: Optional[str] = None


@router.get("/config", status_code=status.HTTP_200_OK, response_model=WorkflowConfigResponse)
async def get_workflow_config(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Get the workflow configuration of the caller's company

    Returns the built-in default (is_default=true, inactive) when the
    company never saved one.
    """
    company_id = UUID(current_user["company_id"])

    result = await GetWorkflowConfigUseCase(uow).execute(company_id)
    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)
    return result.value


@router.put("/config", status_code=status.HTTP_200_OK, response_model=WorkflowConfigResponse)
async def put_workflow_config(
    payload: WorkflowConfigRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Replace the workflow configuration of the caller's company

    Raises:
        - 400 Bad Request: Configuration invalid (problems lists each issue)
        - 403 Forbidden: Caller is not admin / super_admin
    """
    command = UpsertWorkflowConfigCommand(
        company_id=UUID(current_user["company_id"]),
        user_id=UUID(current_user["user_id"]),
        role=current_user["role"],
        transitions=payload.transitions,
        state_access=payload.state_access,
        is_active=payload.is_active,
    )

    result = await UpsertWorkflowConfigUseCase(uow).execute(command)
    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)
    return result.value


@router.post(
    "/transitions/check",
    status_code=status.HTTP_200_OK,
    response_model=TransitionCheckResponse,
)
async def check_transition(
    payload: TransitionCheckRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Whether the caller's role may move a sale from from_state to to_state"""
    result = await CheckTransitionUseCase(uow).execute(
        company_id=UUID(current_user["company_id"]),
        role=current_user["role"],
        from_state=payload.from_state,
        to_state=payload.to_state,
        note=payload.note,
    )
    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)
    return result.value


@router.get(
    "/transitions/available",
    status_code=status.HTTP_200_OK,
    response_model=AvailableTransitionsResponse,
)
async def get_available_transitions(
    from_state: str = Query(..., description="Current sale status"),
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetAvailableTransitionsUseCase(uow).execute(
        company_id=UUID(current_user["company_id"]),
        role=current_user["role"],
        from_state=from_state,
    )
    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)
    return result.value


@router.get(
    "/state-access/{state}",
    status_code=status.HTTP_200_OK,
    response_model=StateAccessResponse,
)
async def get_state_access(
    state: str,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetStateAccessUseCase(uow).execute(
        company_id=UUID(current_user["company_id"]),
        role=current_user["role"],
        state=state,
    )
    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)
    return result.value
