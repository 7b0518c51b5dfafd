"""
Built-in transition conditions evaluated against a sale.

The workflow evaluator only declares conditions; the sales module owns
the facts and decides whether each one holds.
"""

from typing import Dict, List, Optional

from src.domain.entities import ConditionType, Sale
from src.domain.workflow import TransitionCondition


def evaluate_built_in_condition(key: str, sale: Sale) -> bool:
    if key == "has_client":
        return sale.client_id is not None
    if key == "has_plan":
        return sale.plan_id is not None
    if key == "has_beneficiaries":
        return (sale.adherents_count or 0) > 0
    if key == "has_documents":
        return bool(sale.contract_pdf_url)
    if key == "has_template":
        return sale.template_id is not None
    if key == "has_ddjj":
        return (sale.template_responses_count or 0) > 0
    if key == "audit_approved":
        return sale.audit_status == "aprobado"
    if key == "all_signatures_complete":
        return sale.all_signatures_completed is True
    if key == "has_signature_token":
        return bool(sale.signature_token)
    # unknown keys never block
    return True


def unmet_conditions(
    conditions: List[TransitionCondition],
    sale: Sale,
    custom_conditions_met: Optional[Dict[str, bool]] = None,
) -> List[TransitionCondition]:
    """
    Conditions of a transition that are not satisfied.

    Built-in conditions are evaluated against the sale; custom ones
    must be confirmed by the caller in `custom_conditions_met`.
    """
    confirmed = custom_conditions_met or {}
    unmet = []
    for condition in conditions:
        if condition.type == ConditionType.built_in:
            if condition.built_in_key and not evaluate_built_in_condition(
                condition.built_in_key, sale
            ):
                unmet.append(condition)
        elif not confirmed.get(condition.id, False):
            unmet.append(condition)
    return unmet
