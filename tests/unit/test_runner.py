"""
Unit tests for the scenario runner entry point
"""

import sys
import types
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from bridge_migration import runner
from bridge_migration.types.phases import ScenarioState
from bridge_migration.types.results import ScenarioResult


@pytest.fixture
def factory_module(monkeypatch):
    """Importable module exposing a session factory builder"""
    module = types.ModuleType("fake_browser_factory")
    module.sentinel_factory = object()
    module.make_factory = lambda: module.sentinel_factory
    monkeypatch.setitem(sys.modules, "fake_browser_factory", module)
    return module


@pytest.mark.unit
def test_load_session_factory(factory_module):
    """Test 'module:callable' is imported and called"""
    factory = runner.load_session_factory("fake_browser_factory:make_factory")

    assert factory is factory_module.sentinel_factory


@pytest.mark.unit
@pytest.mark.parametrize("target", ["fake_browser_factory", ":make_factory", "fake_browser_factory:"])
def test_load_session_factory_malformed(target):
    """Test malformed factory targets are rejected"""
    with pytest.raises(ValueError, match="module:callable"):
        runner.load_session_factory(target)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_main_without_factory_exits_2(clean_scenario_env):
    """Test the runner refuses to start without a session factory"""
    assert await runner.main() == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_main_with_unknown_factory_exits_2(clean_scenario_env):
    """Test an unimportable factory is reported, not raised"""
    clean_scenario_env.setenv("MIGRATION_SESSION_FACTORY", "no_such_module_xyz:make")

    assert await runner.main() == 2


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize("passed,exit_code", [(True, 0), (False, 1)])
async def test_main_exit_code_follows_result(clean_scenario_env, factory_module, capsys, passed, exit_code):
    """Test exit code and printed report follow the scenario result"""
    clean_scenario_env.setenv("MIGRATION_SESSION_FACTORY", "fake_browser_factory:make_factory")
    clean_scenario_env.setenv("MIGRATED_BRIDGE_ID", "jvb1")
    result = ScenarioResult(
        passed=passed,
        final_state=ScenarioState.DONE if passed else ScenarioState.FAILED,
    )
    scenario = MagicMock()
    scenario.run = AsyncMock(return_value=result)

    with patch("bridge_migration.runner.MigrationScenario", return_value=scenario) as scenario_cls:
        code = await runner.main()

    assert code == exit_code
    config, factory = scenario_cls.call_args.args
    assert config.migrated_bridge_id == "jvb1"
    assert factory is factory_module.sentinel_factory
    assert result.summary() in capsys.readouterr().out


@pytest.mark.unit
@pytest.mark.asyncio
async def test_main_with_malformed_setting_exits_1(clean_scenario_env, factory_module, capsys):
    """Test an unparsable duration is reported as a failed run, not a traceback"""
    clean_scenario_env.setenv("MIGRATION_SESSION_FACTORY", "fake_browser_factory:make_factory")
    clean_scenario_env.setenv("MIGRATED_BRIDGE_ID", "jvb1")
    clean_scenario_env.setenv("MIGRATION_DISCONNECT_TIMEOUT_S", "45s")

    with patch("bridge_migration.runner.MigrationScenario") as scenario_cls:
        code = await runner.main()

    assert code == 1
    scenario_cls.assert_not_called()
    out = capsys.readouterr().out
    assert "❌ FAILED at INIT->SETUP" in out
    assert "[precondition_missing]" in out
    assert "MIGRATION_DISCONNECT_TIMEOUT_S" in out
