"""
Connectivity phases, participant identities and scenario states.
"""

from enum import Enum
from typing import Union


class ConnectivityPhase(str, Enum):
    """
    Observable transport-layer state of one participant.

    Transitions are driven by the participant's transport; the scenario
    only samples them.
    """

    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    FAILED = "failed"

    @classmethod
    def from_ice_state(cls, ice_state: str) -> "ConnectivityPhase":
        """
        Map an ICE connection state to a connectivity phase.

        Raises:
            ValueError: Unknown ICE state
        """
        try:
            return _ICE_STATE_MAP[ice_state.strip().lower()]
        except KeyError:
            raise ValueError(f"Unknown ICE connection state: {ice_state!r}") from None

    @classmethod
    def coerce(cls, value: Union["ConnectivityPhase", str]) -> "ConnectivityPhase":
        """Accept either a phase or a raw ICE state string."""
        if isinstance(value, cls):
            return value
        return cls.from_ice_state(value)


_ICE_STATE_MAP = {
    "new": ConnectivityPhase.CONNECTING,
    "checking": ConnectivityPhase.CONNECTING,
    "connecting": ConnectivityPhase.CONNECTING,
    "connected": ConnectivityPhase.CONNECTED,
    "completed": ConnectivityPhase.CONNECTED,
    "disconnected": ConnectivityPhase.DISCONNECTED,
    "failed": ConnectivityPhase.FAILED,
    "closed": ConnectivityPhase.FAILED,
}


class ParticipantIdentity(str, Enum):
    """Role of a participant in the scenario"""
    OWNER = "owner"
    SECOND_PARTICIPANT = "secondParticipant"


class ScenarioState(str, Enum):
    """Migration scenario state machine"""
    INIT = "INIT"
    SETUP = "SETUP"
    PRE_CONNECTED = "PRE_CONNECTED"
    MIGRATING = "MIGRATING"
    DISCONNECT_OBSERVED = "DISCONNECT_OBSERVED"
    RECONNECT_OBSERVED = "RECONNECT_OBSERVED"
    DONE = "DONE"
    FAILED = "FAILED"


def step_name(source: ScenarioState, target: ScenarioState) -> str:
    """Label of the transition being attempted, e.g. MIGRATING->DISCONNECT_OBSERVED"""
    return f"{source.value}->{target.value}"
