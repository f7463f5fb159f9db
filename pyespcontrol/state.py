"""
 Connection state machine

 Pure transitions over ConnectionState plus the banner projection and the
 reconnection backoff formula. Nothing in here touches the network, timers
 or views; ConnectionMonitor applies these transitions and renders them.
"""
import math
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel

BACKOFF_INITIAL = 1000  # ms
BACKOFF_FACTOR = 1.5
BACKOFF_MAX = 30000  # ms


class ConnectionState(BaseModel):
    """Connectivity to the device as seen by the client."""
    connected: bool = True
    reconnecting: bool = False
    retry_count: int = 0
    last_successful_ping: Optional[float] = None


class BannerKind(str, Enum):
    HIDDEN = "hidden"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"


class Banner(BaseModel):
    """Display projection of the connection state."""
    kind: BannerKind = BannerKind.HIDDEN
    retry_count: int = 0

    @property
    def message(self) -> str:
        if self.kind == BannerKind.WARNING:
            return f"Connection lost. Reconnecting... (attempt {self.retry_count})"
        if self.kind == BannerKind.ERROR:
            return "Connection lost"
        if self.kind == BannerKind.SUCCESS:
            return "Connection restored"
        return ""

    def __str__(self):
        return self.kind.value if self.kind == BannerKind.HIDDEN else f"{self.kind.value}: {self.message}"


def backoff_delay(retry_count: int, initial: int = BACKOFF_INITIAL, factor: float = BACKOFF_FACTOR,
                  cap: int = BACKOFF_MAX) -> int:
    """Return the delay in ms to wait after failed attempt number retry_count (1-based)."""
    if retry_count < 1:
        retry_count = 1
    return int(math.floor(min(initial * factor ** (retry_count - 1), cap)))


def succeeded(state: ConnectionState, now: float) -> Tuple[ConnectionState, bool]:
    """Apply a transport-level success. Returns (new_state, restored)."""
    restored = state.reconnecting
    return ConnectionState(connected=True, reconnecting=False, retry_count=0,
                           last_successful_ping=now), restored


def failed(state: ConnectionState) -> Tuple[ConnectionState, bool]:
    """Apply a transport-level failure. Returns (new_state, lost) where lost
    is True only on the connected -> disconnected edge."""
    if not state.connected:
        return state, False
    return state.model_copy(update={"connected": False}), True


def reconnect_started(state: ConnectionState) -> ConnectionState:
    return state.model_copy(update={"connected": False, "reconnecting": True, "retry_count": 0})


def attempt_started(state: ConnectionState) -> ConnectionState:
    return state.model_copy(update={"retry_count": state.retry_count + 1})


def reconnect_halted(state: ConnectionState) -> ConnectionState:
    return state.model_copy(update={"reconnecting": False, "retry_count": 0})


def project(state: ConnectionState, restoring: bool = False) -> Banner:
    """Map state to the banner the view should show."""
    if state.connected:
        if restoring:
            return Banner(kind=BannerKind.SUCCESS)
        return Banner(kind=BannerKind.HIDDEN)
    if state.reconnecting:
        return Banner(kind=BannerKind.WARNING, retry_count=state.retry_count)
    return Banner(kind=BannerKind.ERROR)
