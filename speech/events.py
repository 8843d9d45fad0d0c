"""Transcript events emitted by a speech source.

A speech source reports a capture session as a sequence of events:

    CaptureStarted -> PartialTranscript* / FinalTranscript* -> CaptureEnded

or ends early with CaptureFailed. Consumers branch on the event class.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class CaptureErrorCode(str, Enum):
    NO_SPEECH = "no-speech"
    AUDIO_CAPTURE = "audio-capture"
    NOT_ALLOWED = "not-allowed"
    NETWORK = "network"
    ABORTED = "aborted"


@dataclass(frozen=True)
class CaptureStarted:
    pass


@dataclass(frozen=True)
class PartialTranscript:
    """In-progress text that may still change."""
    text: str

    @property
    def is_final(self) -> bool:
        return False


@dataclass(frozen=True)
class FinalTranscript:
    """A finished utterance; consecutive finals are concatenated."""
    text: str

    @property
    def is_final(self) -> bool:
        return True


@dataclass(frozen=True)
class CaptureEnded:
    pass


@dataclass(frozen=True)
class CaptureFailed:
    """Capture stopped because of an error.

    ``code`` is usually a CaptureErrorCode value; sources may report codes
    outside that set.
    """
    code: str

    @property
    def is_aborted(self) -> bool:
        return self.code == CaptureErrorCode.ABORTED.value


TranscriptEvent = Union[CaptureStarted, PartialTranscript, FinalTranscript, CaptureEnded, CaptureFailed]
