"""
Get Workflow Config Use Case
"""

from uuid import UUID

from pydantic import ValidationError

from src.app.services.unit_of_work import UnitOfWork
from src.domain.workflow import (
    BUILT_IN_CONDITIONS,
    SALE_STATUS_LABELS,
    WorkflowConfig,
    default_workflow_config,
)
from src.libs.result import Error, Result, Return
from .dtos import BuiltInConditionInfo, WorkflowConfigResponse


def build_config_response(config: WorkflowConfig, is_default: bool, updated_at=None) -> WorkflowConfigResponse:
    return WorkflowConfigResponse(
        is_active=config.is_active,
        is_default=is_default,
        transitions=config.transitions,
        state_access=config.state_access,
        built_in_conditions=[
            BuiltInConditionInfo(key=key, label=label, description=description)
            for key, (label, description) in BUILT_IN_CONDITIONS.items()
        ],
        status_labels=dict(SALE_STATUS_LABELS),
        updated_at=updated_at,
    )


class GetWorkflowConfigUseCase:
    """
    Use case for reading a company's workflow configuration.

    Business Rules:
    - Any authenticated member of the company may read it
    - Companies without a stored configuration get the built-in default,
      flagged inactive and is_default=True
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, company_id: UUID) -> Result[WorkflowConfigResponse]:
        async with self.uow:
            row = await self.uow.workflow_configs.get_by_company_id(company_id)
            if row is None:
                return Return.ok(build_config_response(default_workflow_config(), is_default=True))

            try:
                config = WorkflowConfig.from_document(row.workflow_config, row.is_active)
            except ValidationError:
                return Return.err(
                    Error("WORKFLOW_CONFIG_CORRUPT", "Stored workflow configuration is invalid")
                )

            return Return.ok(
                build_config_response(config, is_default=False, updated_at=row.updated_at)
            )
