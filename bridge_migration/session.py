"""
Participant session contract and scenario-scoped context.

The browser automation that actually drives a participant lives outside
this package. The scenario only needs the narrow surface described by
ParticipantSession, and a SessionFactory that opens one per identity.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Set, Union

from bridge_migration.types.phases import ConnectivityPhase, ParticipantIdentity


class ParticipantSession(Protocol):
    """Handle to one conference participant's runtime."""

    async def join(self, room: str, config_overrides: Dict[str, Any]) -> None:
        """Join the signaling room; return once joined."""
        ...

    async def get_connectivity_phase(self) -> Union[ConnectivityPhase, str]:
        """Current transport phase, or the raw ICE connection state."""
        ...

    async def set_config_override(self, key: str, value: Any) -> None:
        """Change (value=None clears) a client config flag on the live session."""
        ...

    async def dispose(self) -> None:
        """Close the session. May be called on a session that is already gone."""
        ...


class SessionFactory(Protocol):
    """Opens participant sessions (e.g. browser windows) without joining them."""

    async def create(self, identity: ParticipantIdentity) -> ParticipantSession:
        ...


@dataclass
class ManagedSession:
    """A session the scenario created, with what it was created with."""
    identity: ParticipantIdentity
    session: ParticipantSession
    config_overrides: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ScenarioContext:
    """
    Sessions owned by one scenario run.

    Passed through setup, run and teardown instead of living in module
    globals, so that independent runs never share sessions.
    """

    sessions: List[ManagedSession] = field(default_factory=list)
    cleared_overrides: Set[str] = field(default_factory=set)

    def register(
        self,
        identity: ParticipantIdentity,
        session: ParticipantSession,
        config_overrides: Optional[Dict[str, Any]] = None,
    ) -> ManagedSession:
        overrides = dict(config_overrides or {})
        reapplied = self.cleared_overrides.intersection(overrides)
        if identity == ParticipantIdentity.OWNER and reapplied:
            raise RuntimeError(
                f"Override(s) {sorted(reapplied)} were already cleared in this run"
            )
        managed = ManagedSession(identity=identity, session=session, config_overrides=overrides)
        self.sessions.append(managed)
        return managed

    def get(self, identity: ParticipantIdentity) -> Optional[ManagedSession]:
        for managed in self.sessions:
            if managed.identity == identity:
                return managed
        return None

    async def clear_override(self, identity: ParticipantIdentity, key: str) -> None:
        """Clear a creation-time override on a live, already-joined session."""
        managed = self.get(identity)
        if managed is None:
            raise RuntimeError(f"No {identity.value} session in this context")
        await managed.session.set_config_override(key, None)
        managed.config_overrides.pop(key, None)
        self.cleared_overrides.add(key)

    @property
    def live_count(self) -> int:
        return len(self.sessions)
