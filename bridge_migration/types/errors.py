"""
Scenario error taxonomy.

Every failure is fatal to the run: nothing here is retried. Each exception
maps onto a ScenarioErrorType so the result can report which condition
ended the run and at which step.
"""

from enum import Enum
from typing import Optional

from bridge_migration.types.phases import ConnectivityPhase, ParticipantIdentity


class ScenarioErrorType(str, Enum):
    """
    Enumeration of all possible scenario failure categories.

    Categories:
    - Configuration errors: required settings absent
    - Setup errors: a participant failed to join the room
    - Shutdown errors: the bridge REST call failed
    - Timeouts: a connectivity phase was not reached in budget
    """

    PRECONDITION_MISSING = "precondition_missing"
    SETUP_FAILURE = "setup_failure"
    SHUTDOWN_CALL_FAILURE = "shutdown_call_failure"
    TIMEOUT_EXCEEDED = "timeout_exceeded"
    UNEXPECTED_ERROR = "unexpected_error"


class MigrationScenarioError(Exception):
    """Base exception for scenario failures."""

    error_type = ScenarioErrorType.UNEXPECTED_ERROR

    def __init__(self, message: str, step: Optional[str] = None):
        super().__init__(message)
        self.message = message
        # Transition being attempted; tagged by the scenario when unset
        self.step = step


class PreconditionMissing(MigrationScenarioError):
    """Required configuration is absent."""
    error_type = ScenarioErrorType.PRECONDITION_MISSING


class SetupFailure(MigrationScenarioError):
    """A participant session failed to join the signaling room."""
    error_type = ScenarioErrorType.SETUP_FAILURE


class ShutdownCallFailure(MigrationScenarioError):
    """The bridge shutdown REST call failed."""
    error_type = ScenarioErrorType.SHUTDOWN_CALL_FAILURE


class TimeoutExceeded(MigrationScenarioError):
    """A connectivity phase was not observed within its budget."""

    error_type = ScenarioErrorType.TIMEOUT_EXCEEDED

    def __init__(
        self,
        participant: ParticipantIdentity,
        target_phase: ConnectivityPhase,
        timeout_s: float,
        elapsed_s: float,
        last_observed_phase: Optional[ConnectivityPhase] = None,
        step: Optional[str] = None,
    ):
        message = (
            f"{participant.value} did not reach {target_phase.name} within {timeout_s:g}s "
            f"(last observed: {last_observed_phase.name if last_observed_phase else 'nothing'})"
        )
        super().__init__(message, step=step)
        self.participant = participant
        self.target_phase = target_phase
        self.timeout_s = timeout_s
        self.elapsed_s = elapsed_s
        self.last_observed_phase = last_observed_phase
