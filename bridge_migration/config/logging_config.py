"""
Tiered Logging Configuration for the Bridge Migration Scenario

Provides a flexible logging system with 5 levels:
- TRACE (5): Ultra-verbose debugging (every probe sample)
- DEBUG (10): Detailed debugging (state changes, request payloads)
- INFO (20): Standard operational messages (phase observed, shutdown sent)
- WARN (30): Warnings (disposal problems, interrupted shutdown call)
- ERROR (40): Errors (timeouts, setup and shutdown failures)

Environment Variables:
- LOG_LEVEL: Global log level (TRACE, DEBUG, INFO, WARN, ERROR) [default: INFO]
- LOG_LEVEL_PROBE: Override for connectivity probing
- LOG_LEVEL_SHUTDOWN: Override for the bridge shutdown trigger
- LOG_LEVEL_SETUP: Override for participant setup and teardown
- LOG_LEVEL_SCENARIO: Override for the migration scenario state machine

Example Usage:
    from bridge_migration.config.logging_config import get_logger

    logger = get_logger(__name__)
    logger.trace("🔍 Sampled phase: %s", phase)
    logger.info("✅ Owner reached CONNECTED")
    logger.error("❌ Shutdown call failed: %s", error)
"""

import logging
import os


# Define custom TRACE level (more verbose than DEBUG)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


def trace(self, message, *args, **kwargs):
    """Log a message with severity 'TRACE'."""
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kwargs)


# Add trace method to Logger class
logging.Logger.trace = trace


# Module name mapping: Python module path → Logical area name
MODULE_NAME_MAP = {
    "bridge_migration.services.connectivity_probe": "bridge_migration.probe",
    "bridge_migration.services.shutdown_trigger": "bridge_migration.shutdown",
    "bridge_migration.services.participant_setup": "bridge_migration.setup",
    "bridge_migration.services.teardown": "bridge_migration.setup",
    "bridge_migration.scenario": "bridge_migration.scenario",
    "bridge_migration.runner": "bridge_migration.scenario",
}

OVERRIDE_AREAS = ["PROBE", "SHUTDOWN", "SETUP", "SCENARIO"]


def get_log_level(module_name: str, default: str = "INFO") -> int:
    """
    Get the log level for a module, checking both area-specific and global env vars.

    Priority:
    1. Area-specific env var (LOG_LEVEL_PROBE, LOG_LEVEL_SHUTDOWN, etc.)
    2. Global LOG_LEVEL env var
    3. Default level (INFO)

    Args:
        module_name: Python module name (e.g., "bridge_migration.scenario")
        default: Default log level if no env vars set

    Returns:
        Numeric log level (5=TRACE, 10=DEBUG, 20=INFO, 30=WARN, 40=ERROR)
    """
    logical_name = MODULE_NAME_MAP.get(module_name)

    # Only mapped modules have an area override
    if logical_name:
        area = logical_name.split(".")[-1].upper()
        area_level = os.getenv(f"LOG_LEVEL_{area}")
        if area_level:
            return _parse_log_level(area_level)

    global_level = os.getenv("LOG_LEVEL")
    if global_level:
        return _parse_log_level(global_level)

    return _parse_log_level(default)


def _parse_log_level(level_str: str) -> int:
    """
    Parse log level string to numeric value.

    Unknown names fall back to INFO.
    """
    level_map = {
        "TRACE": TRACE,
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARN": logging.WARNING,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
    }
    return level_map.get(level_str.upper(), logging.INFO)


def configure_logging(default_level: str = "INFO") -> None:
    """
    Configure logging system with tiered levels and per-area control.

    Called once by the scenario runner before anything else logs.

    Args:
        default_level: Default log level if LOG_LEVEL env var not set
    """
    global_level = os.getenv("LOG_LEVEL", default_level)
    numeric_level = _parse_log_level(global_level)

    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.info(f"🚀 Logging system initialized (global level: {global_level})")

    area_overrides = []
    for area in OVERRIDE_AREAS:
        override = os.getenv(f"LOG_LEVEL_{area}")
        if override:
            area_overrides.append(f"{area}={override}")

    if area_overrides:
        root_logger.info(f"📋 Area overrides: {', '.join(area_overrides)}")


def get_logger(module_name: str) -> logging.Logger:
    """
    Get a logger for a module with appropriate log level.

    Args:
        module_name: Python module name (use __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(module_name)
    logger.setLevel(get_log_level(module_name))
    return logger
