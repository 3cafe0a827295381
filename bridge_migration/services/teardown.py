"""
Teardown Hook

Disposes every session held by a ScenarioContext. Safe to call on an empty
context and on sessions that are already gone.
"""

from bridge_migration.config.logging_config import get_logger
from bridge_migration.session import ScenarioContext

logger = get_logger(__name__)


class TeardownHook:
    """Idempotent session disposal; counts calls for diagnostics."""

    def __init__(self):
        self.runs = 0

    async def dispose_all(self, context: ScenarioContext) -> int:
        """
        Dispose all sessions in the context and empty it.

        Also forgets which overrides were cleared: the run that cleared
        them is over once its sessions are gone.

        Returns:
            Number of sessions that were disposed
        """
        self.runs += 1
        sessions, context.sessions = context.sessions, []
        context.cleared_overrides.clear()

        # Newest first, mirrors creation order in reverse
        for managed in reversed(sessions):
            try:
                await managed.session.dispose()
                logger.debug(f"🧹 Disposed {managed.identity.value} session")
            except Exception as e:
                # An already-closed session must not break cleanup of the others
                logger.warning(f"⚠️ Disposing {managed.identity.value} session failed: {e}")

        if sessions:
            logger.info(f"🧹 Teardown disposed {len(sessions)} session(s)")
        return len(sessions)
