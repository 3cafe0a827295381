#!/usr/bin/env python3
"""
Bridge Migration Scenario Runner

Runs the migration scenario once from environment configuration and exits
with a CI-friendly status.

Usage:
    MIGRATED_BRIDGE_ID=jvb1.example.com \\
    BRIDGE_REST_ENDPOINT=http://jvb1:8080 \\
    MIGRATION_SESSION_FACTORY=my_browsers.factory:make_factory \\
    python -m bridge_migration.runner   # or: bridge-migration

MIGRATION_SESSION_FACTORY names a zero-argument callable ("module:attr")
returning the SessionFactory that opens participant sessions.

Exit codes:
    0 - scenario passed
    1 - scenario failed, including unusable settings (summary names the failing step)
    2 - session factory could not be loaded
"""

import asyncio
import importlib
import os
import sys

from bridge_migration.config.logging_config import configure_logging, get_logger
from bridge_migration.config.scenario import ScenarioConfig
from bridge_migration.scenario import MigrationScenario
from bridge_migration.session import SessionFactory
from bridge_migration.types.errors import PreconditionMissing
from bridge_migration.types.phases import ScenarioState, step_name
from bridge_migration.types.results import ScenarioFailure, ScenarioResult

logger = get_logger(__name__)

SESSION_FACTORY_ENV = "MIGRATION_SESSION_FACTORY"


def load_session_factory(target: str) -> SessionFactory:
    """
    Resolve "package.module:callable" and call it.

    Raises:
        ValueError: Malformed target
        ImportError / AttributeError: Target cannot be found
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Expected 'module:callable', got {target!r}")
    module = importlib.import_module(module_name)
    return getattr(module, attr)()


async def main() -> int:
    """Main entry point"""
    configure_logging()

    factory_target = os.getenv(SESSION_FACTORY_ENV)
    if not factory_target:
        logger.error(f"❌ {SESSION_FACTORY_ENV} is not set")
        return 2
    try:
        factory = load_session_factory(factory_target)
    except (ValueError, ImportError, AttributeError) as e:
        logger.error(f"❌ Could not load session factory {factory_target!r}: {e}")
        return 2

    try:
        config = ScenarioConfig.from_env()
    except PreconditionMissing as e:
        logger.error(f"❌ {e.message}")
        result = ScenarioResult(
            final_state=ScenarioState.FAILED,
            failure=ScenarioFailure.from_error(
                e, step=step_name(ScenarioState.INIT, ScenarioState.SETUP), elapsed_s=0.0
            ),
        )
    else:
        result = await MigrationScenario(config, factory).run()

    print(result.summary())
    print(result.model_dump_json(indent=2))
    return 0 if result.passed else 1


def cli() -> None:
    """Console script entry point"""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\n\n👋 Scenario interrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    cli()
