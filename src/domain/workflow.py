"""
Sales workflow rules.

Typed form of the per-company workflow JSON plus the evaluator that
answers "may this role move a sale from A to B" and "may this role
see / edit a sale in state S". States are plain strings owned by the
configuration; nothing here hardcodes a topology.
"""

from typing import Dict, FrozenSet, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator

from src.domain.entities.enums import AppRole, ConditionType

TRANSITION_NOT_CONFIGURED = "TRANSITION_NOT_CONFIGURED"
ROLE_NOT_ALLOWED = "ROLE_NOT_ALLOWED"
NOTE_REQUIRED = "NOTE_REQUIRED"

SALE_STATUS_LABELS: Dict[str, str] = {
    "borrador": "Borrador",
    "enviado": "Enviado",
    "firmado": "Firmado",
    "completado": "Completado",
    "cancelado": "Cancelado",
    "pendiente": "Pendiente",
    "en_auditoria": "En Auditoría",
    "rechazado": "Rechazado",
    "aprobado_para_templates": "Aprobado",
    "preparando_documentos": "Preparando Documentos",
    "esperando_ddjj": "Esperando DDJJ",
    "en_revision": "En Revisión",
    "listo_para_enviar": "Listo para Enviar",
    "firmado_parcial": "Firmado Parcial",
    "expirado": "Expirado",
}

# key -> (label, description); truth is evaluated by the module owning the fact
BUILT_IN_CONDITIONS: Dict[str, Tuple[str, str]] = {
    "has_client": ("Cliente asignado", "La venta tiene un cliente asociado"),
    "has_plan": ("Plan seleccionado", "La venta tiene un plan asignado"),
    "has_beneficiaries": ("Adherentes cargados", "La venta tiene al menos un adherente"),
    "has_documents": ("Documentos generados", "La venta tiene PDF de contrato generado"),
    "has_template": ("Template asignado", "La venta tiene template de cuestionario"),
    "has_ddjj": ("DDJJ completada", "El cuestionario de salud fue respondido"),
    "audit_approved": ("Auditoria aprobada", "El proceso de auditoria fue aprobado"),
    "all_signatures_complete": (
        "Firmas completadas",
        "Todas las firmas requeridas fueron completadas",
    ),
    "has_signature_token": ("Link de firma generado", "Se genero un token de firma valido"),
}


class TransitionCondition(BaseModel):
    id: str
    type: ConditionType
    built_in_key: Optional[str] = None
    label: str
    description: Optional[str] = None


class TransitionRule(BaseModel):
    """A directed edge from one sale status to another"""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    from_state: str = Field(alias="from")
    to_state: str = Field(alias="to")
    allowed_roles: List[AppRole] = Field(min_length=1)
    conditions: List[TransitionCondition] = Field(default_factory=list)
    require_note: bool = False

    @model_validator(mode="after")
    def _states_differ(self) -> "TransitionRule":
        if self.from_state == self.to_state:
            raise ValueError(f"Transition {self.id} has identical source and destination")
        return self


class StateAccessRule(BaseModel):
    state: str
    visible_to: List[AppRole] = Field(default_factory=list)
    editable_by: List[AppRole] = Field(default_factory=list)


class WorkflowConfig(BaseModel):
    """
    Workflow configuration of one company.

    Role lookups are precomputed once after validation; treat instances
    as read-only.
    """

    transitions: List[TransitionRule] = Field(default_factory=list)
    state_access: List[StateAccessRule] = Field(default_factory=list)
    is_active: bool = False

    _edges: Dict[Tuple[str, str], TransitionRule] = PrivateAttr(default_factory=dict)
    _edge_roles: Dict[Tuple[str, str], FrozenSet[AppRole]] = PrivateAttr(default_factory=dict)
    _visible: Dict[str, FrozenSet[AppRole]] = PrivateAttr(default_factory=dict)
    _editable: Dict[str, FrozenSet[AppRole]] = PrivateAttr(default_factory=dict)

    @field_validator("transitions", "state_access", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return [] if value is None else value

    def model_post_init(self, __context) -> None:
        for rule in self.transitions:
            edge = (rule.from_state, rule.to_state)
            # first rule for an edge wins
            if edge not in self._edges:
                self._edges[edge] = rule
                self._edge_roles[edge] = frozenset(rule.allowed_roles)
        for access in self.state_access:
            if access.state not in self._visible:
                self._visible[access.state] = frozenset(access.visible_to)
                self._editable[access.state] = frozenset(access.editable_by)

    def find_rule(self, from_state: str, to_state: str) -> Optional[TransitionRule]:
        return self._edges.get((from_state, to_state))

    def roles_for(self, from_state: str, to_state: str) -> FrozenSet[AppRole]:
        return self._edge_roles.get((from_state, to_state), frozenset())

    def access_for(self, state: str) -> Optional[Tuple[FrozenSet[AppRole], FrozenSet[AppRole]]]:
        if state not in self._visible:
            return None
        return self._visible[state], self._editable[state]

    def to_document(self) -> dict:
        """JSON blob persisted in company_workflow_configs.workflow_config"""
        return self.model_dump(mode="json", by_alias=True, exclude={"is_active"})

    @classmethod
    def from_document(cls, document: Optional[dict], is_active: bool) -> "WorkflowConfig":
        return cls.model_validate({**(document or {}), "is_active": is_active})


class TransitionDecision(BaseModel):
    allowed: bool
    code: Optional[str] = None
    reasons: List[str] = Field(default_factory=list)
    rule: Optional[TransitionRule] = None
    note_required: bool = False

    @property
    def conditions(self) -> List[TransitionCondition]:
        return list(self.rule.conditions) if self.rule else []


def _coerce_role(role: Union[str, AppRole]) -> Optional[AppRole]:
    try:
        return AppRole(role)
    except ValueError:
        return None


def is_transition_allowed(
    config: WorkflowConfig,
    from_state: str,
    to_state: str,
    role: Union[str, AppRole],
    note: Optional[str] = None,
) -> TransitionDecision:
    """
    Decide whether `role` may move a sale from `from_state` to `to_state`.

    Declared conditions are reported on the returned rule but not
    evaluated here.
    """
    if not config.is_active:
        return TransitionDecision(allowed=True)

    rule = config.find_rule(from_state, to_state)
    if rule is None:
        return TransitionDecision(
            allowed=False,
            code=TRANSITION_NOT_CONFIGURED,
            reasons=[f"Transition {from_state} -> {to_state} is not configured"],
        )

    codes: List[str] = []
    reasons: List[str] = []

    app_role = _coerce_role(role)
    if app_role is None or app_role not in config.roles_for(from_state, to_state):
        codes.append(ROLE_NOT_ALLOWED)
        reasons.append(f'Role "{getattr(role, "value", role)}" cannot perform this transition')

    if rule.require_note and not (note or "").strip():
        codes.append(NOTE_REQUIRED)
        reasons.append("A note is required for this transition")

    return TransitionDecision(
        allowed=not codes,
        code=codes[0] if codes else None,
        reasons=reasons,
        rule=rule,
        note_required=rule.require_note,
    )


def available_transitions(
    config: WorkflowConfig, from_state: str, role: Union[str, AppRole]
) -> List[TransitionRule]:
    if not config.is_active:
        return []
    app_role = _coerce_role(role)
    if app_role is None:
        return []
    return [
        rule
        for rule in config.transitions
        if rule.from_state == from_state
        and app_role in config.roles_for(rule.from_state, rule.to_state)
    ]


def is_visible(config: WorkflowConfig, state: str, role: Union[str, AppRole]) -> bool:
    if not config.is_active:
        return True
    access = config.access_for(state)
    if access is None:
        return True
    return _coerce_role(role) in access[0]


def is_editable(config: WorkflowConfig, state: str, role: Union[str, AppRole]) -> bool:
    if not config.is_active:
        return True
    access = config.access_for(state)
    if access is None:
        return False
    return _coerce_role(role) in access[1]


def validate_workflow_config(config: WorkflowConfig) -> List[str]:
    """
    Checks applied before a configuration is saved.

    Returns:
        Human-readable problems; empty when the configuration is valid
    """
    problems: List[str] = []

    seen_edges = set()
    for rule in config.transitions:
        edge = (rule.from_state, rule.to_state)
        if edge in seen_edges:
            problems.append(f"Duplicate transition {rule.from_state} -> {rule.to_state}")
        seen_edges.add(edge)
        for condition in rule.conditions:
            if condition.type == ConditionType.built_in:
                if condition.built_in_key not in BUILT_IN_CONDITIONS:
                    problems.append(
                        f"Unknown built-in condition '{condition.built_in_key}' in transition {rule.id}"
                    )
            elif not condition.label.strip():
                problems.append(f"Custom condition {condition.id} in transition {rule.id} needs a label")

    seen_states = set()
    for access in config.state_access:
        if access.state in seen_states:
            problems.append(f"Duplicate access rule for state '{access.state}'")
        seen_states.add(access.state)
        not_visible = set(access.editable_by) - set(access.visible_to)
        if not_visible:
            roles = ", ".join(sorted(role.value for role in not_visible))
            problems.append(f"State '{access.state}': editable_by roles not in visible_to: {roles}")

    return problems


def _rule(rule_id, from_state, to_state, roles, conditions=(), require_note=False) -> TransitionRule:
    return TransitionRule(
        id=rule_id,
        from_state=from_state,
        to_state=to_state,
        allowed_roles=list(roles),
        conditions=[
            TransitionCondition(
                id=condition_id,
                type=ConditionType.built_in,
                built_in_key=key,
                label=BUILT_IN_CONDITIONS[key][0],
            )
            for condition_id, key in conditions
        ],
        require_note=require_note,
    )


_SELLERS = ("vendedor", "gestor", "admin", "super_admin")
_REVIEWERS = ("auditor", "admin", "super_admin")
_ADMINS = ("admin", "super_admin")
_STAFF = ("vendedor", "gestor", "supervisor", "auditor", "admin", "super_admin")


def default_workflow_config(is_active: bool = False) -> WorkflowConfig:
    """Configuration matching the implicit flow used before workflows were configurable"""
    transitions = [
        _rule("default-1", "borrador", "en_auditoria", _SELLERS,
              [("dc-1", "has_client"), ("dc-2", "has_plan")]),
        _rule("default-2", "en_auditoria", "aprobado_para_templates", _REVIEWERS),
        _rule("default-3", "en_auditoria", "rechazado", _REVIEWERS, require_note=True),
        _rule("default-4", "rechazado", "borrador", _SELLERS),
        _rule("default-5", "aprobado_para_templates", "enviado", _SELLERS,
              [("dc-3", "has_signature_token")]),
        _rule("default-6", "enviado", "firmado", _SELLERS,
              [("dc-4", "all_signatures_complete")]),
        _rule("default-7", "firmado", "completado", _ADMINS),
        _rule("default-8", "borrador", "cancelado", _SELLERS, require_note=True),
        _rule("default-9", "enviado", "cancelado", _ADMINS, require_note=True),
    ]
    editable = {
        "borrador": _SELLERS,
        "en_auditoria": _REVIEWERS,
        "rechazado": _SELLERS,
        "aprobado_para_templates": _SELLERS,
        "enviado": _ADMINS,
        "firmado": _ADMINS,
        "completado": (),
        "cancelado": (),
    }
    state_access = [
        StateAccessRule(state=state, visible_to=list(_STAFF), editable_by=list(roles))
        for state, roles in editable.items()
    ]
    return WorkflowConfig(transitions=transitions, state_access=state_access, is_active=is_active)
