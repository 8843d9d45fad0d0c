"""Voice command session management."""
from .controller import CAPTURE_ERROR_MESSAGES, VoiceCommandController
from .state import SessionState

__all__ = ["VoiceCommandController", "SessionState", "CAPTURE_ERROR_MESSAGES"]
