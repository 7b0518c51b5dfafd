"""
Change Sale Status Use Case

Applies a workflow transition to a sale.
"""

import logging

from src.app.services.sale_conditions import unmet_conditions
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.workflow.config_loader import load_workflow_config
from src.domain.base import isoformat_z, utcnow
from src.domain.entities import AuditEvent
from src.domain.workflow import SALE_STATUS_LABELS, is_transition_allowed
from src.libs.result import Error, Result, Return
from .dtos import ChangeSaleStatusCommand, SaleStatusChangeResponse

logger = logging.getLogger(__name__)


class ChangeSaleStatusUseCase:
    """
    Use case for changing the status of a sale.

    Business Rules:
    - Sale must belong to the caller's company
    - Target status must differ from the current one
    - The company workflow must allow the edge for the caller's role,
      with a non-blank note when the rule demands one
    - Every declared condition must hold: built-in conditions are
      evaluated against the sale, custom ones confirmed by the caller
    - Inactive or missing workflow allows any change
    - Each change is audited with from/to states and the note
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, command: ChangeSaleStatusCommand) -> Result[SaleStatusChangeResponse]:
        """
        Execute change sale status use case.

        Errors:
            - SALE_NOT_FOUND: No such sale in the company
            - SAME_STATUS: Sale already in the target status
            - TRANSITION_NOT_CONFIGURED / ROLE_NOT_ALLOWED / NOTE_REQUIRED:
              Workflow refused the change
            - CONDITIONS_NOT_MET: Declared conditions do not hold
            - WORKFLOW_CONFIG_CORRUPT: Stored configuration unreadable
        """
        to_state = command.to_state.strip()

        async with self.uow:
            sale = await self.uow.sales.get_for_company(command.sale_id, command.company_id)
            if sale is None:
                return Return.err(Error("SALE_NOT_FOUND", "Sale not found"))

            from_state = sale.status
            if from_state == to_state:
                return Return.err(
                    Error("SAME_STATUS", f"Sale is already in status '{to_state}'")
                )

            loaded = await load_workflow_config(self.uow, command.company_id)
            if loaded.is_err():
                return loaded

            decision = is_transition_allowed(
                loaded.value, from_state, to_state, command.role, command.note
            )
            if not decision.allowed:
                return Return.err(
                    Error(decision.code, "; ".join(decision.reasons), {"reasons": decision.reasons})
                )

            unmet = unmet_conditions(decision.conditions, sale, command.custom_conditions_met)
            if unmet:
                return Return.err(
                    Error(
                        "CONDITIONS_NOT_MET",
                        "Transition conditions are not met",
                        {
                            "unmet_conditions": [
                                {"id": condition.id, "label": condition.label}
                                for condition in unmet
                            ]
                        },
                    )
                )

            now = utcnow()
            sale.status = to_state
            sale.updated_at = now
            await self.uow.sales.update(sale)

            audit = AuditEvent(
                company_id=command.company_id,
                user_id=command.user_id,
                action="sale_status_changed",
                event_metadata={
                    "sale_id": str(sale.id),
                    "from": from_state,
                    "to": to_state,
                    "note": command.note,
                    "role": command.role,
                },
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()
            logger.info(f"Sale {sale.id} moved {from_state} -> {to_state}")

            return Return.ok(
                SaleStatusChangeResponse(
                    sale_id=str(sale.id),
                    from_state=from_state,
                    to_state=to_state,
                    status_label=SALE_STATUS_LABELS.get(to_state, to_state),
                    changed_at=isoformat_z(now),
                )
            )
