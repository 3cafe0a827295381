"""
Connectivity Probe

Polls one participant session until it reports a target connectivity
phase, or fails with TimeoutExceeded once the budget (measured from call
entry) is spent.

The transport state is only reachable through the session's accessor, so
observation is active sampling rather than push. The sampling loop is a
tenacity AsyncRetrying that retries on the *result*: every sample that is
not the target phase is a "retry", and the stop condition is the budget.
"""

import asyncio
import time
from typing import Awaitable, Callable, Iterable, Optional

from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    retry_if_result,
    stop_after_delay,
    wait_fixed,
)

from bridge_migration.config.logging_config import TRACE, get_logger
from bridge_migration.session import ManagedSession
from bridge_migration.types.errors import TimeoutExceeded
from bridge_migration.types.phases import ConnectivityPhase

logger = get_logger(__name__)


class ConnectivityProbe:
    """Single wait primitive reused for every connectivity wait point."""

    def __init__(
        self,
        poll_interval_s: float = 0.25,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        """
        Args:
            poll_interval_s: Seconds between two samples
            sleep: Sleep coroutine used between samples (asyncio.sleep by default)
        """
        if poll_interval_s <= 0:
            raise ValueError("poll_interval_s must be positive")
        self.poll_interval_s = poll_interval_s
        self._sleep = sleep or asyncio.sleep

    async def wait_for_phase(
        self,
        managed: ManagedSession,
        target_phase: ConnectivityPhase,
        timeout_s: float,
        accept: Iterable[ConnectivityPhase] = (),
    ) -> float:
        """
        Block until the session reports target_phase.

        Args:
            managed: Session to sample, with its identity
            target_phase: Phase to wait for
            timeout_s: Budget in seconds from call entry
            accept: Extra phases that count as reaching the target

        Returns:
            Seconds it took to observe the phase

        Raises:
            TimeoutExceeded: Phase not observed within timeout_s
        """
        started = time.monotonic()
        acceptable = {target_phase, *accept}
        last_phase: Optional[ConnectivityPhase] = None

        async def sample() -> ConnectivityPhase:
            nonlocal last_phase
            last_phase = ConnectivityPhase.coerce(await managed.session.get_connectivity_phase())
            logger.trace(
                "🔍 %s phase=%s (waiting for %s)",
                managed.identity.value, last_phase.name, target_phase.name,
            )
            return last_phase

        retrying = AsyncRetrying(
            retry=retry_if_result(lambda phase: phase not in acceptable),
            stop=stop_after_delay(timeout_s),
            wait=wait_fixed(self.poll_interval_s),
            before_sleep=before_sleep_log(logger, TRACE),
            sleep=self._sleep,
        )

        try:
            # wait_for bounds a sample that never returns
            phase = await asyncio.wait_for(retrying(sample), timeout=timeout_s)
        except (RetryError, asyncio.TimeoutError):
            elapsed = time.monotonic() - started
            logger.error(
                f"❌ {managed.identity.value} did not reach {target_phase.name} "
                f"within {timeout_s:g}s (last observed: {last_phase.name if last_phase else 'nothing'})"
            )
            raise TimeoutExceeded(
                participant=managed.identity,
                target_phase=target_phase,
                timeout_s=timeout_s,
                elapsed_s=elapsed,
                last_observed_phase=last_phase,
            ) from None

        elapsed = time.monotonic() - started
        logger.info(f"✅ {managed.identity.value} reached {phase.name} after {elapsed:.2f}s")
        return elapsed
