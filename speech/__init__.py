"""Speech input contract.

Speech recognition itself happens outside this project. This package defines
the events a recognizer reports and the push-based source interface the
session controller consumes.

Available sources:
- TextSpeechSource: Feeds already transcribed text (CLI, tests)

Any object implementing SpeechSource can be used in its place.
"""
from .events import (
    CaptureEnded,
    CaptureErrorCode,
    CaptureFailed,
    CaptureStarted,
    FinalTranscript,
    PartialTranscript,
    TranscriptEvent,
)
from .source import SpeechSource, TextSpeechSource, TranscriptListener

__all__ = [
    "CaptureStarted",
    "PartialTranscript",
    "FinalTranscript",
    "CaptureEnded",
    "CaptureFailed",
    "CaptureErrorCode",
    "TranscriptEvent",
    "SpeechSource",
    "TextSpeechSource",
    "TranscriptListener",
]
