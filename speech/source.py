"""Speech source contract and a text-driven implementation.

Speech-to-text itself is outside this project. Anything that can push
transcript events to listeners (a browser recognizer bridge, a cloud
streaming client, a test script) can drive a VoiceCommandController by
implementing :class:`SpeechSource`.
"""
from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Protocol

from loguru import logger

from core.exceptions import CaptureError

from .events import (
    CaptureEnded,
    CaptureErrorCode,
    CaptureFailed,
    CaptureStarted,
    FinalTranscript,
    PartialTranscript,
    TranscriptEvent,
)

TranscriptListener = Callable[[TranscriptEvent], None]


class SpeechSource(Protocol):
    """Push-based transcript source.

    ``start`` may raise to signal the capture could not begin; everything
    afterwards is reported through events.
    """

    def subscribe(self, listener: TranscriptListener) -> None: ...

    def unsubscribe(self, listener: TranscriptListener) -> None: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def abort(self) -> None: ...


class TextSpeechSource:
    """Speech source fed with already transcribed text.

    Used by the command line front end and by tests. Text is pushed with
    :meth:`feed` (or :meth:`feed_partial` for interim results) while the
    source is capturing; :meth:`stop` ends the capture.

    Args:
        language: BCP-47 language tag reported to listeners' owners
        available: When False, :meth:`start` raises CaptureError
    """

    def __init__(self, language: str = "en-US", available: bool = True) -> None:
        self.language = language
        self.available = available
        self._listeners: List[TranscriptListener] = []
        self._capturing = False

    @property
    def capturing(self) -> bool:
        return self._capturing

    def subscribe(self, listener: TranscriptListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: TranscriptListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def start(self) -> None:
        if not self.available:
            raise CaptureError("Speech input is not available", code=CaptureErrorCode.AUDIO_CAPTURE.value)
        if self._capturing:
            raise CaptureError("Capture already in progress")
        self._capturing = True
        logger.debug(f"Text speech source started ({self.language})")
        self._emit(CaptureStarted())

    def stop(self) -> None:
        if not self._capturing:
            return
        self._capturing = False
        self._emit(CaptureEnded())

    def abort(self) -> None:
        if not self._capturing:
            return
        self._capturing = False
        self._emit(CaptureFailed(CaptureErrorCode.ABORTED.value))

    def feed_partial(self, text: str) -> None:
        self._emit(PartialTranscript(text))

    def feed(self, text: str) -> None:
        self._emit(FinalTranscript(text))

    def fail(self, code: str) -> None:
        """Report a capture error and end the capture."""
        self._capturing = False
        self._emit(CaptureFailed(code))

    def speak(self, utterances: Iterable[str], partial: Optional[str] = None) -> None:
        """Convenience: emit an optional partial, each utterance as final, then stop."""
        if partial:
            self.feed_partial(partial)
        for utterance in utterances:
            self.feed(utterance)
        self.stop()

    def _emit(self, event: TranscriptEvent) -> None:
        # Listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            listener(event)
