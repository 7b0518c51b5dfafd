"""
CompanyWorkflowConfig Entity

Stored workflow configuration (transition rules + state access) of a company.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, SQLModel

from src.domain.base import utcnow


class CompanyWorkflowConfig(SQLModel, table=True):
    """
    CompanyWorkflowConfig entity - JSON blob persisted per company.

    Business Rules:
    - One row per company
    - workflow_config is parsed into src.domain.workflow.WorkflowConfig
      before any evaluation
    - is_active = False means legacy permissive behaviour
    """

    __tablename__ = "company_workflow_configs"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    company_id: UUID = Field(foreign_key="companies.id", unique=True, index=True)

    workflow_config: dict = Field(default_factory=dict, sa_column=Column(JSON))
    is_active: bool = Field(default=False)

    updated_by: Optional[UUID] = None

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
