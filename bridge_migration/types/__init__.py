"""
Bridge Migration Types Module

Phases, errors and result schemas shared by the scenario components.
"""

from .phases import ConnectivityPhase, ParticipantIdentity, ScenarioState, step_name
from .errors import (
    MigrationScenarioError,
    PreconditionMissing,
    ScenarioErrorType,
    SetupFailure,
    ShutdownCallFailure,
    TimeoutExceeded,
)
from .results import PhaseTransition, ScenarioFailure, ScenarioResult

__all__ = [
    "ConnectivityPhase",
    "ParticipantIdentity",
    "ScenarioState",
    "step_name",
    "MigrationScenarioError",
    "PreconditionMissing",
    "ScenarioErrorType",
    "SetupFailure",
    "ShutdownCallFailure",
    "TimeoutExceeded",
    "PhaseTransition",
    "ScenarioFailure",
    "ScenarioResult",
]
