"""
Workflow Use Cases

Configuration management and transition / state-access queries.
"""

from .check_transition_use_case import CheckTransitionUseCase
from .get_available_transitions_use_case import GetAvailableTransitionsUseCase
from .get_state_access_use_case import GetStateAccessUseCase
from .get_workflow_config_use_case import GetWorkflowConfigUseCase
from .upsert_workflow_config_use_case import UpsertWorkflowConfigUseCase

__all__ = [
    "GetWorkflowConfigUseCase",
    "UpsertWorkflowConfigUseCase",
    "CheckTransitionUseCase",
    "GetAvailableTransitionsUseCase",
    "GetStateAccessUseCase",
]
