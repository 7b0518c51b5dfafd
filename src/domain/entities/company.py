"""
Company Entity

Tenant that owns sales, policies and workflow configuration.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utcnow


class Company(SQLModel, table=True):
    """
    Company entity - isolated tenant.

    Business Rules:
    - Every per-company row (policy, settings, workflow, sales) references it
    - No data is shared across companies
    """

    __tablename__ = "companies"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
