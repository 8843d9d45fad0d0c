"""Core infrastructure: exceptions, result type and error boundaries."""
from __future__ import annotations

from .exceptions import VoiceCommandException, ParsingError, CaptureError, ConfigurationError
from .result import Result, Success, Failure

__all__ = [
    "VoiceCommandException",
    "ParsingError",
    "CaptureError",
    "ConfigurationError",
    "Result",
    "Success",
    "Failure",
]
