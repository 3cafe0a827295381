"""
Migration Scenario Configuration

Environment-based settings for the bridge migration scenario.
Loaded from environment variables with fallback defaults.
"""

import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from bridge_migration.types.errors import PreconditionMissing


DEFAULT_BRIDGE_REST_ENDPOINT = "http://localhost:8080"
DEFAULT_SHUTDOWN_PATH = "/colibri/shutdown"

# Client config flag that forces a conference onto one bridge
PINNED_BRIDGE_CONFIG_KEY = "enforcedBridge"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ['true', '1', 'yes']


def _env_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except ValueError:
        raise PreconditionMissing(f"{name} must be a number of seconds, got {raw!r}") from None


@dataclass
class ScenarioConfig:
    """Configuration for one bridge migration run."""

    # Bridge that hosts the conference and gets shut down (required)
    migrated_bridge_id: Optional[str] = None

    # REST API of the migrated bridge
    bridge_rest_endpoint: str = DEFAULT_BRIDGE_REST_ENDPOINT
    shutdown_path: str = DEFAULT_SHUTDOWN_PATH
    graceful_shutdown: bool = True
    rest_timeout_s: float = 30.0

    room_name: str = "bridge-migration-test"

    # Wait budgets (seconds), each wait is bounded on its own
    join_timeout_s: float = 10.0
    disconnect_timeout_s: float = 45.0
    reconnect_timeout_s: float = 60.0
    poll_interval_s: float = 0.25

    # ICE may report "failed" instead of "disconnected" when a bridge vanishes
    accept_failed_as_disconnected: bool = False

    def __post_init__(self):
        # Unset and empty both mean "use the default endpoint"
        if not self.bridge_rest_endpoint:
            self.bridge_rest_endpoint = DEFAULT_BRIDGE_REST_ENDPOINT

    @classmethod
    def from_env(cls) -> "ScenarioConfig":
        """
        Load settings from environment variables.

        Environment Variables:
            MIGRATED_BRIDGE_ID: Bridge to pin the conference to and shut down
            BRIDGE_REST_ENDPOINT: REST endpoint of that bridge (default: http://localhost:8080)
            BRIDGE_SHUTDOWN_GRACEFUL: Graceful instead of forced shutdown (default: true)
            BRIDGE_SHUTDOWN_PATH: Shutdown resource path (default: /colibri/shutdown)
            BRIDGE_REST_TIMEOUT_S: HTTP timeout for the shutdown call (default: 30)
            MIGRATION_ROOM_NAME: Conference room joined by both participants
            MIGRATION_JOIN_TIMEOUT_S: Room join / initial connectivity budget (default: 10)
            MIGRATION_DISCONNECT_TIMEOUT_S: Disconnect budget per participant (default: 45)
            MIGRATION_RECONNECT_TIMEOUT_S: Reconnect budget per participant (default: 60)
            MIGRATION_POLL_INTERVAL_S: Connectivity sampling interval (default: 0.25)
            MIGRATION_ACCEPT_FAILED_AS_DISCONNECTED: Count FAILED as disconnected (default: false)

        Returns:
            ScenarioConfig with values loaded from environment or defaults
        """
        return cls(
            migrated_bridge_id=os.getenv("MIGRATED_BRIDGE_ID") or None,
            bridge_rest_endpoint=os.getenv("BRIDGE_REST_ENDPOINT", ""),
            shutdown_path=os.getenv("BRIDGE_SHUTDOWN_PATH", DEFAULT_SHUTDOWN_PATH),
            graceful_shutdown=_env_flag("BRIDGE_SHUTDOWN_GRACEFUL", "true"),
            rest_timeout_s=_env_float("BRIDGE_REST_TIMEOUT_S", "30"),
            room_name=os.getenv("MIGRATION_ROOM_NAME", "bridge-migration-test"),
            join_timeout_s=_env_float("MIGRATION_JOIN_TIMEOUT_S", "10"),
            disconnect_timeout_s=_env_float("MIGRATION_DISCONNECT_TIMEOUT_S", "45"),
            reconnect_timeout_s=_env_float("MIGRATION_RECONNECT_TIMEOUT_S", "60"),
            poll_interval_s=_env_float("MIGRATION_POLL_INTERVAL_S", "0.25"),
            accept_failed_as_disconnected=_env_flag(
                "MIGRATION_ACCEPT_FAILED_AS_DISCONNECTED", "false"
            ),
        )

    def validate(self) -> None:
        """Validate configuration values (not the required bridge id)."""
        for name in (
            "rest_timeout_s",
            "join_timeout_s",
            "disconnect_timeout_s",
            "reconnect_timeout_s",
            "poll_interval_s",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")

        parsed = urlparse(self.bridge_rest_endpoint)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(
                f"bridge_rest_endpoint must be an http(s) URL, got {self.bridge_rest_endpoint!r}"
            )

        if not self.shutdown_path.startswith("/"):
            raise ValueError("shutdown_path must start with '/'")

    def require_preconditions(self) -> str:
        """
        Return the migrated bridge id or fail the run.

        Raises:
            PreconditionMissing: migrated_bridge_id is unset or empty
        """
        if not self.migrated_bridge_id:
            raise PreconditionMissing(
                "The bridge to be migrated has not been specified (MIGRATED_BRIDGE_ID)"
            )
        return self.migrated_bridge_id
