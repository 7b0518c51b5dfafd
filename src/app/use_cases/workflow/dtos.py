"""
Workflow Use Case DTOs (Data Transfer Objects)
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.domain.workflow import StateAccessRule, TransitionCondition, TransitionRule


# ============================================================================
# Command DTOs
# ============================================================================


class UpsertWorkflowConfigCommand(BaseModel):
    """Replace the workflow configuration of a company"""

    company_id: UUID
    user_id: UUID
    role: str
    transitions: List[Dict[str, Any]] = Field(default_factory=list)
    state_access: List[Dict[str, Any]] = Field(default_factory=list)
    is_active: bool = False


# ============================================================================
# Response DTOs
# ============================================================================


class BuiltInConditionInfo(BaseModel):
    key: str
    label: str
    description: str


class WorkflowConfigResponse(BaseModel):
    """Workflow configuration plus the catalogue the editor needs"""

    is_active: bool
    is_default: bool
    transitions: List[TransitionRule]
    state_access: List[StateAccessRule]
    built_in_conditions: List[BuiltInConditionInfo]
    status_labels: Dict[str, str]
    updated_at: Optional[datetime] = None


class TransitionCheckResponse(BaseModel):
    allowed: bool
    code: Optional[str] = None
    reasons: List[str] = Field(default_factory=list)
    note_required: bool = False
    conditions: List[TransitionCondition] = Field(default_factory=list)
    workflow_active: bool


class AvailableTransitionsResponse(BaseModel):
    from_state: str
    transitions: List[TransitionRule]


class StateAccessResponse(BaseModel):
    state: str
    visible: bool
    editable: bool
