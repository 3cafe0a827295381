"""
Scenario result schema.

A ScenarioResult is what CI sees: pass/fail, the elapsed time at every
state transition, and on failure the exact step, condition and timing.

Example:
    ```python
    result = await MigrationScenario(config, session_factory).run()
    print(result.summary())
    # ❌ FAILED at MIGRATING->DISCONNECT_OBSERVED after 47.31s [timeout_exceeded]:
    #    owner did not reach DISCONNECTED within 45s (last observed: CONNECTED)
    ```
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from bridge_migration.types.errors import MigrationScenarioError, ScenarioErrorType, TimeoutExceeded
from bridge_migration.types.phases import ConnectivityPhase, ParticipantIdentity, ScenarioState


class PhaseTransition(BaseModel):
    """A state the scenario entered and when."""

    state: ScenarioState = Field(..., description="State entered")
    elapsed_s: float = Field(..., ge=0.0, description="Seconds since scenario start")
    detail: Optional[str] = Field(default=None, description="What was observed")

    class Config:
        frozen = True  # Immutable


class ScenarioFailure(BaseModel):
    """
    The condition that moved the scenario to FAILED.

    Attributes:
        error_type: Failure category (see ScenarioErrorType)
        step: Transition being attempted (e.g. "MIGRATING->DISCONNECT_OBSERVED")
        message: Human-readable description for CI logs
        elapsed_s: Seconds since scenario start when the failure was recorded
        participant: Participant the failing wait was about, if any
        target_phase: Phase that was expected, for timeouts
        timeout_s: Budget that was exceeded, for timeouts
        last_observed_phase: Last sampled phase before the timeout
    """

    error_type: ScenarioErrorType
    step: str
    message: str
    elapsed_s: float = Field(..., ge=0.0)
    participant: Optional[ParticipantIdentity] = None
    target_phase: Optional[ConnectivityPhase] = None
    timeout_s: Optional[float] = None
    last_observed_phase: Optional[ConnectivityPhase] = None

    class Config:
        frozen = True  # Immutable

    @classmethod
    def from_error(cls, error: Exception, step: str, elapsed_s: float) -> "ScenarioFailure":
        """Build a failure record from a raised exception."""
        if not isinstance(error, MigrationScenarioError):
            return cls(
                error_type=ScenarioErrorType.UNEXPECTED_ERROR,
                step=step,
                message=f"{type(error).__name__}: {error}",
                elapsed_s=elapsed_s,
            )

        failure = dict(
            error_type=error.error_type,
            step=error.step or step,
            message=error.message,
            elapsed_s=elapsed_s,
        )
        if isinstance(error, TimeoutExceeded):
            failure.update(
                participant=error.participant,
                target_phase=error.target_phase,
                timeout_s=error.timeout_s,
                last_observed_phase=error.last_observed_phase,
            )
        return cls(**failure)


class ScenarioResult(BaseModel):
    """Outcome of one migration scenario run."""

    passed: bool = False
    final_state: ScenarioState = ScenarioState.INIT
    transitions: List[PhaseTransition] = Field(default_factory=list)
    failure: Optional[ScenarioFailure] = None
    elapsed_s: float = 0.0
    teardown_runs: int = 0

    def state_elapsed(self, state: ScenarioState) -> Optional[float]:
        """Elapsed seconds at which a state was entered, or None."""
        for transition in self.transitions:
            if transition.state == state:
                return transition.elapsed_s
        return None

    def summary(self) -> str:
        """One-line outcome for CI logs."""
        if self.passed:
            return f"✅ PASSED in {self.elapsed_s:.2f}s"
        if self.failure is None:
            return f"❌ FAILED in state {self.final_state.value} after {self.elapsed_s:.2f}s"
        return (
            f"❌ FAILED at {self.failure.step} after {self.failure.elapsed_s:.2f}s "
            f"[{self.failure.error_type.value}]: {self.failure.message}"
        )
