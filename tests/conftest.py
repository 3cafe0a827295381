"""
Pytest configuration and shared fixtures for bridge migration tests
"""
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from bridge_migration.config.scenario import ScenarioConfig
from bridge_migration.services.shutdown_trigger import BridgeRestClient
from tests.mocks.mock_bridge_server import MockBridgeServer
from tests.mocks.mock_conference import MockConference


# ============================================================
# Configuration
# ============================================================

@pytest.fixture
def fast_config() -> ScenarioConfig:
    """
    Scenario configuration with budgets shrunk for in-memory sessions

    Real budgets are 10s/45s/60s; the mocks migrate within ~50ms.
    """
    return ScenarioConfig(
        migrated_bridge_id="jvb-migrated.example.com",
        bridge_rest_endpoint="http://bridge.test:8080",
        room_name="migration-room",
        join_timeout_s=1.0,
        disconnect_timeout_s=1.0,
        reconnect_timeout_s=1.0,
        poll_interval_s=0.01,
    )


@pytest.fixture
def clean_scenario_env(monkeypatch):
    """Remove every scenario env var so defaults apply"""
    for var in [
        'MIGRATED_BRIDGE_ID',
        'BRIDGE_REST_ENDPOINT',
        'BRIDGE_SHUTDOWN_GRACEFUL',
        'BRIDGE_SHUTDOWN_PATH',
        'BRIDGE_REST_TIMEOUT_S',
        'MIGRATION_ROOM_NAME',
        'MIGRATION_JOIN_TIMEOUT_S',
        'MIGRATION_DISCONNECT_TIMEOUT_S',
        'MIGRATION_RECONNECT_TIMEOUT_S',
        'MIGRATION_POLL_INTERVAL_S',
        'MIGRATION_ACCEPT_FAILED_AS_DISCONNECTED',
        'MIGRATION_SESSION_FACTORY',
    ]:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


# ============================================================
# Mock Conference & Bridge
# ============================================================

@pytest.fixture
def conference() -> MockConference:
    """Conference where both participants migrate cleanly"""
    return MockConference()


@pytest.fixture
def bridge_server(conference) -> MockBridgeServer:
    """Mock bridge that drops the conference when shut down"""
    return MockBridgeServer(conference=conference)


@pytest.fixture
def rest_client(bridge_server) -> BridgeRestClient:
    """Bridge REST client wired to the mock bridge"""
    return BridgeRestClient(transport=bridge_server.transport())
