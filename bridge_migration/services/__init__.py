"""Scenario building blocks: probing, shutdown, setup and teardown."""

from .connectivity_probe import ConnectivityProbe
from .participant_setup import ParticipantSetup
from .shutdown_trigger import BridgeRestClient, ShutdownRequest, ShutdownTrigger
from .teardown import TeardownHook

__all__ = [
    "ConnectivityProbe",
    "ParticipantSetup",
    "BridgeRestClient",
    "ShutdownRequest",
    "ShutdownTrigger",
    "TeardownHook",
]
