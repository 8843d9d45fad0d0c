"""Custom exception hierarchy for the voice command interpreter."""
from __future__ import annotations


class VoiceCommandException(Exception):
    """Base exception for all voice command errors."""
    pass


class ParsingError(VoiceCommandException):
    """Raised when a transcript cannot be interpreted."""
    pass


class CaptureError(VoiceCommandException):
    """Raised when the speech source fails to start or deliver transcripts."""

    def __init__(self, message: str, code: str = "") -> None:
        super().__init__(message)
        self.code = code


class ConfigurationError(VoiceCommandException):
    """Raised when configuration is invalid or missing."""
    pass
