"""
Get State Access Use Case
"""

from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.workflow import is_editable, is_visible
from src.libs.result import Result, Return
from .config_loader import load_workflow_config
from .dtos import StateAccessResponse


class GetStateAccessUseCase:
    """Use case for checking whether a role may see and edit sales in a state"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, company_id: UUID, role: str, state: str) -> Result[StateAccessResponse]:
        async with self.uow:
            loaded = await load_workflow_config(self.uow, company_id)
            if loaded.is_err():
                return loaded
            config = loaded.value

            return Return.ok(
                StateAccessResponse(
                    state=state,
                    visible=is_visible(config, state, role),
                    editable=is_editable(config, state, role),
                )
            )
