"""Voice session states."""
from __future__ import annotations

from enum import Enum


class SessionState(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"
    PROCESSING = "processing"
    SUCCESS = "success"
    ERROR = "error"

    @property
    def accepts_start(self) -> bool:
        """Whether a new capture may begin from this state."""
        return self in (SessionState.IDLE, SessionState.SUCCESS, SessionState.ERROR)
