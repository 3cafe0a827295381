"""Configuration modules for the bridge migration scenario."""

from .scenario import (
    DEFAULT_BRIDGE_REST_ENDPOINT,
    DEFAULT_SHUTDOWN_PATH,
    PINNED_BRIDGE_CONFIG_KEY,
    ScenarioConfig,
)

__all__ = [
    'DEFAULT_BRIDGE_REST_ENDPOINT',
    'DEFAULT_SHUTDOWN_PATH',
    'PINNED_BRIDGE_CONFIG_KEY',
    'ScenarioConfig',
]
