"""
Participant Setup

Opens the owner and second participant sessions and waits for each to join
the shared signaling room. Room join is the only guarantee given here;
transport connectivity is asserted by the scenario afterwards.
"""

import asyncio
from typing import Any, Dict, Optional

from bridge_migration.config.logging_config import get_logger
from bridge_migration.session import ParticipantSession, ScenarioContext, SessionFactory
from bridge_migration.types.errors import SetupFailure
from bridge_migration.types.phases import ParticipantIdentity

logger = get_logger(__name__)


class ParticipantSetup:
    """Creates sessions into a ScenarioContext. Join failures are not retried."""

    def __init__(
        self,
        factory: SessionFactory,
        context: ScenarioContext,
        room_name: str,
        join_timeout_s: float = 10.0,
    ):
        self.factory = factory
        self.context = context
        self.room_name = room_name
        self.join_timeout_s = join_timeout_s

    async def create_owner(self, config_overrides: Optional[Dict[str, Any]] = None) -> ParticipantSession:
        return await self._create(ParticipantIdentity.OWNER, config_overrides or {})

    async def create_second_participant(self) -> ParticipantSession:
        return await self._create(ParticipantIdentity.SECOND_PARTICIPANT, {})

    async def _create(self, identity: ParticipantIdentity, config_overrides: Dict[str, Any]) -> ParticipantSession:
        try:
            session = await self.factory.create(identity)
        except Exception as e:
            raise SetupFailure(f"Could not open {identity.value} session: {e}") from e

        # Registered before joining so teardown also closes a session that failed to join
        self.context.register(identity, session, config_overrides)

        logger.info(f"👤 {identity.value} joining room '{self.room_name}' (overrides: {config_overrides or 'none'})")
        try:
            await asyncio.wait_for(
                session.join(self.room_name, dict(config_overrides)),
                timeout=self.join_timeout_s,
            )
        except asyncio.TimeoutError:
            raise SetupFailure(
                f"{identity.value} did not join room '{self.room_name}' within {self.join_timeout_s:g}s"
            ) from None
        except Exception as e:
            raise SetupFailure(f"{identity.value} failed to join room '{self.room_name}': {e}") from e

        logger.info(f"✅ {identity.value} joined room '{self.room_name}'")
        return session
