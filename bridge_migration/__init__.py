"""
Bridge Migration

End-to-end scenario that checks a conference survives the shutdown of the
bridge hosting it.
"""

from bridge_migration.config.scenario import ScenarioConfig
from bridge_migration.scenario import MigrationScenario
from bridge_migration.types.results import ScenarioResult

__all__ = [
    "MigrationScenario",
    "ScenarioConfig",
    "ScenarioResult",
]
