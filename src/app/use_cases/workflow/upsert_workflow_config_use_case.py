"""
Upsert Workflow Config Use Case

Validates and stores a company's workflow configuration.
"""

import logging

from pydantic import ValidationError

from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import AppRole, AuditEvent, CompanyWorkflowConfig
from src.domain.workflow import WorkflowConfig, validate_workflow_config
from src.libs.result import Error, Result, Return
from .dtos import UpsertWorkflowConfigCommand, WorkflowConfigResponse
from .get_workflow_config_use_case import build_config_response

logger = logging.getLogger(__name__)


def _describe_validation_error(exc: ValidationError):
    return [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    ]


class UpsertWorkflowConfigUseCase:
    """
    Use case for replacing a company's workflow configuration.

    Business Rules:
    - Only admin or super_admin may change it
    - Rejected as a whole when any rule is malformed:
      unknown roles, empty allowed_roles, from == to, duplicate edges,
      unknown built-in condition keys, custom conditions without label,
      duplicate state rules, editable_by roles missing from visible_to
    - Each save is audited
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, command: UpsertWorkflowConfigCommand) -> Result[WorkflowConfigResponse]:
        if command.role not in [AppRole.admin.value, AppRole.super_admin.value]:
            return Return.err(
                Error("INSUFFICIENT_ROLE", "Only admins can change the workflow configuration")
            )

        try:
            config = WorkflowConfig(
                transitions=command.transitions,
                state_access=command.state_access,
                is_active=command.is_active,
            )
        except ValidationError as e:
            return Return.err(
                Error(
                    "INVALID_WORKFLOW_CONFIG",
                    "Workflow configuration is invalid",
                    {"problems": _describe_validation_error(e)},
                )
            )

        problems = validate_workflow_config(config)
        if problems:
            return Return.err(
                Error(
                    "INVALID_WORKFLOW_CONFIG",
                    "Workflow configuration is invalid",
                    {"problems": problems},
                )
            )

        async with self.uow:
            row = await self.uow.workflow_configs.get_by_company_id(command.company_id)
            if row is None:
                row = CompanyWorkflowConfig(company_id=command.company_id)

            row.workflow_config = config.to_document()
            row.is_active = config.is_active
            row.updated_by = command.user_id
            row.updated_at = utcnow()
            row = await self.uow.workflow_configs.save(row)

            audit = AuditEvent(
                company_id=command.company_id,
                user_id=command.user_id,
                action="workflow_config_updated",
                event_metadata={
                    "is_active": config.is_active,
                    "transitions": len(config.transitions),
                    "state_access": len(config.state_access),
                },
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()
            logger.info(f"Workflow config of company {command.company_id} updated")

            return Return.ok(
                build_config_response(config, is_default=False, updated_at=row.updated_at)
            )
