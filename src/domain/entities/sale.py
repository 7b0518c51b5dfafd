"""
Sale Entity

Insurance sale moving through the company's workflow states.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class Sale(SQLModel, table=True):
    """
    Sale entity - only the fields used by status changes and
    built-in transition conditions.

    Business Rules:
    - status is a free string; valid states come from workflow configuration
    - Status changes go through the workflow evaluator
    """

    __tablename__ = "sales"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    company_id: UUID = Field(foreign_key="companies.id", index=True)

    status: str = Field(default="borrador", max_length=50)

    client_id: Optional[UUID] = None
    plan_id: Optional[UUID] = None
    template_id: Optional[UUID] = None
    contract_pdf_url: Optional[str] = Field(default=None, max_length=1024)
    signature_token: Optional[str] = Field(default=None, max_length=255)
    all_signatures_completed: bool = Field(default=False)
    audit_status: Optional[str] = Field(default=None, max_length=50)
    adherents_count: int = Field(default=0)
    template_responses_count: int = Field(default=0)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_sale_company_status", "company_id", "status"),)
