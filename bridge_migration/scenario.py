"""
============================================================
Bridge Migration Scenario
Checks that a conference survives the shutdown of its bridge
- Pins the conference onto the bridge under test
- Shuts that bridge down out-of-band (graceful by default)
- Requires both participants to drop and then recover
  transport connectivity within bounded windows
- Always disposes the sessions it created
============================================================

State machine:

    INIT -> SETUP -> PRE_CONNECTED -> MIGRATING -> DISCONNECT_OBSERVED
         -> RECONNECT_OBSERVED -> DONE

FAILED is reachable from every state and records the step that was being
attempted, the condition and the elapsed time.
"""

import time
from typing import Iterable, Optional

from bridge_migration.config.logging_config import get_logger
from bridge_migration.config.scenario import PINNED_BRIDGE_CONFIG_KEY, ScenarioConfig
from bridge_migration.services.connectivity_probe import ConnectivityProbe
from bridge_migration.services.participant_setup import ParticipantSetup
from bridge_migration.services.shutdown_trigger import BridgeRestClient, ShutdownRequest, ShutdownTrigger
from bridge_migration.services.teardown import TeardownHook
from bridge_migration.session import ScenarioContext, SessionFactory
from bridge_migration.types.errors import MigrationScenarioError, PreconditionMissing, TimeoutExceeded
from bridge_migration.types.phases import ConnectivityPhase, ParticipantIdentity, ScenarioState, step_name
from bridge_migration.types.results import PhaseTransition, ScenarioFailure, ScenarioResult

logger = get_logger(__name__)

OWNER = ParticipantIdentity.OWNER
SECOND = ParticipantIdentity.SECOND_PARTICIPANT


class MigrationScenario:
    """Drives one bridge migration run and reports a ScenarioResult."""

    def __init__(
        self,
        config: ScenarioConfig,
        session_factory: SessionFactory,
        context: Optional[ScenarioContext] = None,
        rest_client: Optional[BridgeRestClient] = None,
        probe: Optional[ConnectivityProbe] = None,
        teardown: Optional[TeardownHook] = None,
    ):
        self.config = config
        self.session_factory = session_factory
        self.context = context or ScenarioContext()
        self.rest_client = rest_client or BridgeRestClient(
            shutdown_path=config.shutdown_path,
            timeout=config.rest_timeout_s,
        )
        self.probe = probe or ConnectivityProbe(poll_interval_s=config.poll_interval_s)
        self.teardown = teardown or TeardownHook()

        self.state = ScenarioState.INIT
        self.shutdown: Optional[ShutdownTrigger] = None
        self.result = ScenarioResult()
        self._started = 0.0
        self._attempting = step_name(ScenarioState.INIT, ScenarioState.SETUP)

    # ------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------

    async def run(self) -> ScenarioResult:
        """
        Run the scenario end to end.

        Never raises for scenario failures: they are reported in the
        returned result. Teardown runs exactly once at the end, whatever
        the outcome.
        """
        self._started = time.monotonic()
        self.state = ScenarioState.INIT
        self.result = ScenarioResult()
        self.shutdown = ShutdownTrigger(self.rest_client)
        self._record(ScenarioState.INIT)

        try:
            await self._run_steps()
            self._enter(ScenarioState.DONE)
            self.result.passed = True
        except Exception as e:
            self._fail(e)
        finally:
            await self._finish()

        return self.result

    # ------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------

    async def _run_steps(self) -> None:
        config = self.config

        # INIT -> SETUP
        self._attempt(ScenarioState.SETUP)
        bridge_id = config.require_preconditions()
        try:
            config.validate()
        except ValueError as e:
            raise PreconditionMissing(f"Invalid scenario configuration: {e}") from e
        request = ShutdownRequest(endpoint=config.bridge_rest_endpoint, graceful=config.graceful_shutdown)

        logger.info(
            f"🚀 Start conference migration test. Migrated bridge: {bridge_id}, "
            f"REST endpoint: {request.endpoint}"
        )
        # Leftovers from a previous run on the same context
        await self.teardown.dispose_all(self.context)
        self._enter(ScenarioState.SETUP)

        # SETUP -> PRE_CONNECTED
        self._attempt(ScenarioState.PRE_CONNECTED)
        setup = ParticipantSetup(
            self.session_factory,
            self.context,
            room_name=config.room_name,
            join_timeout_s=config.join_timeout_s,
        )
        await setup.create_owner({PINNED_BRIDGE_CONFIG_KEY: bridge_id})
        await setup.create_second_participant()
        await self._await_phase(OWNER, ConnectivityPhase.CONNECTED, config.join_timeout_s)
        await self._await_phase(SECOND, ConnectivityPhase.CONNECTED, config.join_timeout_s)
        self._enter(ScenarioState.PRE_CONNECTED, "both participants connected")

        # PRE_CONNECTED -> MIGRATING
        self._attempt(ScenarioState.MIGRATING)
        await self.context.clear_override(OWNER, PINNED_BRIDGE_CONFIG_KEY)
        logger.info(f"📌 Cleared owner's {PINNED_BRIDGE_CONFIG_KEY} override")
        self.shutdown.trigger(request)
        self._enter(ScenarioState.MIGRATING, f"shutdown sent (graceful={request.graceful})")

        # MIGRATING -> DISCONNECT_OBSERVED, owner first
        self._attempt(ScenarioState.DISCONNECT_OBSERVED)
        accept = (ConnectivityPhase.FAILED,) if config.accept_failed_as_disconnected else ()
        logger.info("⏳ Wait for disconnected...")
        owner_s = await self._await_phase(OWNER, ConnectivityPhase.DISCONNECTED, config.disconnect_timeout_s, accept)
        second_s = await self._await_phase(SECOND, ConnectivityPhase.DISCONNECTED, config.disconnect_timeout_s, accept)
        self._enter(
            ScenarioState.DISCONNECT_OBSERVED,
            f"owner after {owner_s:.2f}s, secondParticipant after {second_s:.2f}s",
        )

        # DISCONNECT_OBSERVED -> RECONNECT_OBSERVED
        self._attempt(ScenarioState.RECONNECT_OBSERVED)
        logger.info("⏳ Wait for reconnected...")
        owner_s = await self._await_phase(OWNER, ConnectivityPhase.CONNECTED, config.reconnect_timeout_s)
        second_s = await self._await_phase(SECOND, ConnectivityPhase.CONNECTED, config.reconnect_timeout_s)
        self._enter(
            ScenarioState.RECONNECT_OBSERVED,
            f"owner after {owner_s:.2f}s, secondParticipant after {second_s:.2f}s",
        )

        # RECONNECT_OBSERVED -> DONE only with a clean shutdown call
        self._attempt(ScenarioState.DONE)
        self.shutdown.raise_if_failed()

    async def _await_phase(
        self,
        identity: ParticipantIdentity,
        target: ConnectivityPhase,
        timeout_s: float,
        accept: Iterable[ConnectivityPhase] = (),
    ) -> float:
        managed = self.context.get(identity)
        if managed is None:
            raise RuntimeError(f"No {identity.value} session in this run")
        try:
            return await self.probe.wait_for_phase(managed, target, timeout_s, accept=accept)
        except TimeoutExceeded as timeout:
            # A failed shutdown call explains the timeout better than the timeout itself
            if self.shutdown is not None and self.shutdown.error is not None:
                raise self.shutdown.error from timeout
            raise

    # ------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------

    def _elapsed(self) -> float:
        return time.monotonic() - self._started

    def _record(self, state: ScenarioState, detail: Optional[str] = None) -> None:
        self.result.transitions.append(
            PhaseTransition(state=state, elapsed_s=self._elapsed(), detail=detail)
        )
        self.result.final_state = state

    def _attempt(self, target: ScenarioState) -> None:
        self._attempting = step_name(self.state, target)

    def _enter(self, state: ScenarioState, detail: Optional[str] = None) -> None:
        logger.info(f"➡️ {step_name(self.state, state)} at {self._elapsed():.2f}s")
        self.state = state
        self._record(state, detail)

    def _fail(self, error: Exception) -> None:
        if isinstance(error, MigrationScenarioError) and error.step is None:
            error.step = self._attempting

        failure = ScenarioFailure.from_error(error, step=self._attempting, elapsed_s=self._elapsed())
        if isinstance(error, MigrationScenarioError):
            logger.error(f"❌ {failure.step} failed [{failure.error_type.value}]: {failure.message}")
        else:
            logger.exception(f"❌ Unexpected error during {failure.step}: {error}")

        self.state = ScenarioState.FAILED
        self.result.failure = failure
        self.result.passed = False
        self._record(ScenarioState.FAILED, failure.message)

    async def _finish(self) -> None:
        try:
            await self.teardown.dispose_all(self.context)
            self.result.teardown_runs += 1
        finally:
            if self.shutdown is not None:
                await self.shutdown.aclose()
                # The call may have failed while sessions were being disposed
                if self.result.passed and self.shutdown.error is not None:
                    self._fail(self.shutdown.error)
            self.result.elapsed_s = self._elapsed()
            logger.info(self.result.summary())
