"""
Sales API Routes

Status changes governed by the company workflow and the role-filtered
sale list.
"""

from typing import Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import raise_for_error
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.sales import ChangeSaleStatusUseCase, ListSalesUseCase
from src.app.use_cases.sales.dtos import (
    ChangeSaleStatusCommand,
    SaleListResponse,
    SaleStatusChangeResponse,
)
from src.depends import get_current_user, get_unit_of_work

router = APIRouter(prefix="/sales", tags=["Sales"])

STATUS_BY_CODE = {
    "SALE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "SAME_STATUS": status.HTTP_400_BAD_REQUEST,
    "TRANSITION_NOT_CONFIGURED": status.HTTP_400_BAD_REQUEST,
    "NOTE_REQUIRED": status.HTTP_400_BAD_REQUEST,
    "CONDITIONS_NOT_MET": status.HTTP_400_BAD_REQUEST,
    "ROLE_NOT_ALLOWED": status.HTTP_403_FORBIDDEN,
}


class ChangeStatusRequest(BaseModel):
    """POST /sales/{sale_id}/status request payload"""

    to_state: str = Field(min_length=1)
    note: Optional[str] = None
    custom_conditions_met: Dict[str, bool] = Field(default_factory=dict)


@router.get("", status_code=status.HTTP_200_OK, response_model=SaleListResponse)
async def list_sales(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Sales of the caller's company in states visible to the caller's role"""
    result = await ListSalesUseCase(uow).execute(
        company_id=UUID(current_user["company_id"]), role=current_user["role"]
    )
    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)
    return result.value


@router.post(
    "/{sale_id}/status",
    status_code=status.HTTP_200_OK,
    response_model=SaleStatusChangeResponse,
)
async def change_sale_status(
    sale_id: UUID,
    payload: ChangeStatusRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Move a sale to a new status

    Raises:
        - 400 Bad Request: Transition not configured, note missing,
          conditions unmet (unmet_conditions), or same status
        - 403 Forbidden: Role not allowed for the transition
        - 404 Not Found: Sale not in the caller's company
    """
    command = ChangeSaleStatusCommand(
        company_id=UUID(current_user["company_id"]),
        user_id=UUID(current_user["user_id"]),
        role=current_user["role"],
        sale_id=sale_id,
        to_state=payload.to_state,
        note=payload.note,
        custom_conditions_met=payload.custom_conditions_met,
    )

    result = await ChangeSaleStatusUseCase(uow).execute(command)
    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)
    return result.value
