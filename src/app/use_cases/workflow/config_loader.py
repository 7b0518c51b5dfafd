"""
Shared lookup of a company's effective workflow configuration.
"""

import logging
from uuid import UUID

from pydantic import ValidationError

from src.app.services.unit_of_work import UnitOfWork
from src.domain.workflow import WorkflowConfig
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


async def load_workflow_config(uow: UnitOfWork, company_id: UUID) -> Result[WorkflowConfig]:
    """
    Effective configuration for evaluation.

    A company without a stored row gets an inactive (permissive)
    configuration. Must be called inside `async with uow`.
    """
    row = await uow.workflow_configs.get_by_company_id(company_id)
    if row is None:
        return Return.ok(WorkflowConfig(is_active=False))

    try:
        return Return.ok(WorkflowConfig.from_document(row.workflow_config, row.is_active))
    except ValidationError as e:
        logger.error(f"Stored workflow config of company {company_id} is invalid: {e}")
        return Return.err(
            Error("WORKFLOW_CONFIG_CORRUPT", "Stored workflow configuration is invalid")
        )
