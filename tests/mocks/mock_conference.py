"""
Mock Conference for Testing

Simulates participant sessions whose ICE connection state follows a scripted
timeline: connect after joining, drop when the bridge is shut down, and
recover once the orchestrator has moved them to another bridge.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from bridge_migration.types.phases import ConnectivityPhase, ParticipantIdentity


@dataclass
class ParticipantBehaviour:
    """Scripted timeline for one participant (seconds)"""
    connect_delay_s: float = 0.01
    disconnect_delay_s: float = 0.02
    reconnect_delay_s: float = 0.15
    connects: bool = True
    disconnects: bool = True
    reconnects: bool = True
    disconnect_state: str = "disconnected"
    join_error: Optional[Exception] = None
    join_hangs: bool = False
    dispose_error: Optional[Exception] = None


class MockParticipantSession:
    """In-memory ParticipantSession driven by a MockConference"""

    def __init__(self, identity: ParticipantIdentity, conference: "MockConference", behaviour: ParticipantBehaviour):
        self.identity = identity
        self.conference = conference
        self.behaviour = behaviour
        self.ice_state = "new"
        self.joined_room: Optional[str] = None
        self.config_overrides: Dict[str, Any] = {}
        self.dispose_calls = 0
        self.disposed = False

    async def join(self, room: str, config_overrides: Dict[str, Any]) -> None:
        if self.behaviour.join_hangs:
            await asyncio.Event().wait()
        if self.behaviour.join_error is not None:
            raise self.behaviour.join_error

        self.joined_room = room
        self.config_overrides = dict(config_overrides)
        self.ice_state = "checking"
        if self.behaviour.connects:
            self._set_later(self.behaviour.connect_delay_s, "completed")

    async def get_connectivity_phase(self) -> str:
        if self.disposed:
            raise RuntimeError(f"{self.identity.value} session is gone")
        self.conference.observations.append(
            (self.identity, ConnectivityPhase.from_ice_state(self.ice_state))
        )
        return self.ice_state

    async def set_config_override(self, key: str, value: Any) -> None:
        self.conference.events.append(("override", self.identity, key, value))
        if value is None:
            self.config_overrides.pop(key, None)
        else:
            self.config_overrides[key] = value

    async def dispose(self) -> None:
        self.dispose_calls += 1
        self.disposed = True
        self.ice_state = "closed"
        if self.behaviour.dispose_error is not None:
            raise self.behaviour.dispose_error

    def on_bridge_shutdown(self) -> None:
        if self.joined_room is None:
            return
        if self.behaviour.disconnects:
            self._set_later(self.behaviour.disconnect_delay_s, self.behaviour.disconnect_state)
            if self.behaviour.reconnects:
                self._set_later(
                    self.behaviour.disconnect_delay_s + self.behaviour.reconnect_delay_s,
                    "connected",
                )

    def _set_later(self, delay_s: float, ice_state: str) -> None:
        asyncio.get_running_loop().call_later(delay_s, self._set, ice_state)

    def _set(self, ice_state: str) -> None:
        # A disposed session never comes back
        if not self.disposed:
            self.ice_state = ice_state


class MockConference:
    """
    SessionFactory that hands out MockParticipantSessions

    Usage:
        conference = MockConference(owner=ParticipantBehaviour(disconnects=False))
        scenario = MigrationScenario(config, conference, rest_client=...)
    """

    def __init__(
        self,
        owner: Optional[ParticipantBehaviour] = None,
        second: Optional[ParticipantBehaviour] = None,
    ):
        self.behaviours = {
            ParticipantIdentity.OWNER: owner or ParticipantBehaviour(),
            ParticipantIdentity.SECOND_PARTICIPANT: second or ParticipantBehaviour(),
        }
        self.sessions: List[MockParticipantSession] = []
        self.events: List[Tuple] = []
        self.observations: List[Tuple[ParticipantIdentity, ConnectivityPhase]] = []
        self.bridge_down = False

    async def create(self, identity: ParticipantIdentity) -> MockParticipantSession:
        session = MockParticipantSession(identity, self, self.behaviours[identity])
        self.sessions.append(session)
        self.events.append(("create", identity))
        return session

    def session(self, identity: ParticipantIdentity) -> MockParticipantSession:
        for session in self.sessions:
            if session.identity == identity:
                return session
        raise KeyError(identity)

    def shutdown_bridge(self, graceful: bool) -> None:
        self.events.append(("shutdown", graceful))
        self.bridge_down = True
        for session in self.sessions:
            session.on_bridge_shutdown()

    def first_observation(self, identity: ParticipantIdentity, phase: ConnectivityPhase) -> int:
        """Index of the first sample of phase for identity, -1 if never sampled"""
        for index, observed in enumerate(self.observations):
            if observed == (identity, phase):
                return index
        return -1
