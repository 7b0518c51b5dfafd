"""
Sales Use Case DTOs (Data Transfer Objects)
"""

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ChangeSaleStatusCommand(BaseModel):
    """Move a sale to a new status under the company workflow"""

    company_id: UUID
    user_id: UUID
    role: str
    sale_id: UUID
    to_state: str
    note: Optional[str] = None
    custom_conditions_met: Dict[str, bool] = Field(default_factory=dict)


class SaleStatusChangeResponse(BaseModel):
    sale_id: str
    from_state: str
    to_state: str
    status_label: str
    changed_at: str


class SaleSummary(BaseModel):
    id: UUID
    status: str
    status_label: str
    editable: bool
    created_at: datetime
    updated_at: datetime


class SaleListResponse(BaseModel):
    sales: List[SaleSummary]
