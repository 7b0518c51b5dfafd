"""
Get Available Transitions Use Case
"""

from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.workflow import available_transitions
from src.libs.result import Result, Return
from .config_loader import load_workflow_config
from .dtos import AvailableTransitionsResponse


class GetAvailableTransitionsUseCase:
    """
    Use case for listing the transitions a role may take from a state.

    Business Rules:
    - Inactive or missing configuration yields an empty list
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, company_id: UUID, role: str, from_state: str
    ) -> Result[AvailableTransitionsResponse]:
        async with self.uow:
            loaded = await load_workflow_config(self.uow, company_id)
            if loaded.is_err():
                return loaded

            return Return.ok(
                AvailableTransitionsResponse(
                    from_state=from_state,
                    transitions=available_transitions(loaded.value, from_state, role),
                )
            )
