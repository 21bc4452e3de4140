"""Machine states and the Linode status mapping."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Union


class State(str, Enum):
    NONE = "none"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


# Numeric codes reported by the legacy API.
LEGACY_STATUS_CODES: Dict[int, State] = {
    -2: State.ERROR,  # boot failed
    -1: State.STARTING,  # being created
    0: State.STARTING,  # brand new
    1: State.RUNNING,
    2: State.STOPPED,  # powered off
    3: State.STOPPING,  # shutting down
    4: State.STOPPED,  # saved to disk
}

STATUS_NAMES: Dict[str, State] = {
    "running": State.RUNNING,
    "booting": State.STARTING,
    "rebooting": State.STARTING,
    "provisioning": State.STARTING,
    "shutting_down": State.STOPPING,
    "deleting": State.STOPPING,
    "offline": State.STOPPED,
    "stopped": State.STOPPED,
    "failed": State.ERROR,
}


def map_status(status: Union[int, str, None]) -> State:
    """Translate a provider status into a machine state.

    Integers are read as legacy numeric codes and strings as named statuses.
    Transitional statuses such as ``migrating`` or ``cloning``, and anything
    unrecognised, map to ``State.NONE``.
    """
    if isinstance(status, bool):
        return State.NONE
    if isinstance(status, int):
        return LEGACY_STATUS_CODES.get(status, State.NONE)
    if isinstance(status, str):
        return STATUS_NAMES.get(status.strip().lower(), State.NONE)
    return State.NONE
