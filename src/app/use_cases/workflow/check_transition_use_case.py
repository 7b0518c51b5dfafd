"""
Check Transition Use Case

Answers "may my role move a sale from A to B" without touching a sale.
"""

from typing import Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.workflow import is_transition_allowed
from src.libs.result import Result, Return
from .config_loader import load_workflow_config
from .dtos import TransitionCheckResponse


class CheckTransitionUseCase:
    """
    Use case for evaluating a single transition.

    Business Rules:
    - Inactive or missing configuration allows every transition
    - Declared conditions are returned for display, not evaluated
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        company_id: UUID,
        role: str,
        from_state: str,
        to_state: str,
        note: Optional[str] = None,
    ) -> Result[TransitionCheckResponse]:
        async with self.uow:
            loaded = await load_workflow_config(self.uow, company_id)
            if loaded.is_err():
                return loaded
            config = loaded.value

            decision = is_transition_allowed(config, from_state, to_state, role, note)
            return Return.ok(
                TransitionCheckResponse(
                    allowed=decision.allowed,
                    code=decision.code,
                    reasons=decision.reasons,
                    note_required=decision.note_required,
                    conditions=decision.conditions,
                    workflow_active=config.is_active,
                )
            )
