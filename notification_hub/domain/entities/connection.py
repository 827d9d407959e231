"""Domain types describing the realtime connection lifecycle."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ConnectionStatus(str, Enum):
    """Lifecycle states of the realtime channel."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


@dataclass(frozen=True)
class ConnectionState:
    """Snapshot of the connection published to subscribers and the UI."""

    status: ConnectionStatus = ConnectionStatus.DISCONNECTED
    reconnect_attempts: int = 0
    generation: int = 0

    @property
    def is_connected(self) -> bool:
        return self.status is ConnectionStatus.CONNECTED


@dataclass(frozen=True)
class UserSession:
    """Identity and credentials used to authenticate the realtime channel."""

    user_id: str
    token: str


__all__ = ["ConnectionState", "ConnectionStatus", "UserSession"]
