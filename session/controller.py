"""
Interpretation session controller.

Drives one voice capture at a time through the session states:

    idle -> listening -> processing -> success | error
              |  \\
              |   +-- capture error -> error   (aborted -> idle)
              +-- no transcript -> idle

Transcript events arrive from a SpeechSource; when the capture ends the
accumulated transcript is interpreted and the result is handed to the
``on_result`` callback.
"""
from __future__ import annotations

from typing import Callable, Dict, Optional

from loguru import logger

from app.use_cases import InterpretTranscriptUseCase, VoiceCommandResult, VoiceCommandsContext
from core.error_handler import handle_exceptions
from interpreter.classifier import CommandType
from interpreter.vocabulary import DEFAULT_VOCABULARY, Vocabulary
from speech.events import (
    CaptureEnded,
    CaptureErrorCode,
    CaptureFailed,
    CaptureStarted,
    FinalTranscript,
    PartialTranscript,
    TranscriptEvent,
)
from speech.source import SpeechSource

from .state import SessionState

NOT_SUPPORTED_MESSAGE = "Voice input is not supported"
START_FAILED_MESSAGE = "Failed to start voice input"
UNKNOWN_CAPTURE_ERROR_MESSAGE = "Voice recognition error"
NOT_UNDERSTOOD_MESSAGE = "Could not understand command"

CAPTURE_ERROR_MESSAGES: Dict[str, str] = {
    CaptureErrorCode.NO_SPEECH.value: "No speech detected. Please try again.",
    CaptureErrorCode.AUDIO_CAPTURE.value: "No microphone found. Please check your settings.",
    CaptureErrorCode.NOT_ALLOWED.value: "Microphone access denied. Please enable it in settings.",
    CaptureErrorCode.NETWORK.value: "Network error. Please check your connection.",
}

ResultCallback = Callable[[VoiceCommandResult], None]
ErrorCallback = Callable[[str], None]


class VoiceCommandController:
    """State machine for one voice command session at a time.

    Attributes:
        state: Current SessionState
        transcript: Concatenated final transcript of the current capture
        interim_transcript: Latest in-progress text
        error: User-facing error message, if the last session failed
        result: VoiceCommandResult of the last completed session
    """

    def __init__(
        self,
        source: Optional[SpeechSource],
        context: VoiceCommandsContext,
        command_type=CommandType.AUTO,
        on_result: Optional[ResultCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
    ):
        self.source = source
        self.command_type = CommandType.parse(command_type)
        self.on_result = on_result
        self.on_error = on_error
        self.interpreter = InterpretTranscriptUseCase(context, vocabulary)

        self.state = SessionState.IDLE
        self.transcript = ""
        self.interim_transcript = ""
        self.error: Optional[str] = None
        self.result: Optional[VoiceCommandResult] = None

    @property
    def is_supported(self) -> bool:
        return self.source is not None

    @property
    def context(self) -> VoiceCommandsContext:
        return self.interpreter.context

    @context.setter
    def context(self, value: VoiceCommandsContext) -> None:
        """Replace the parser context; takes effect for the next interpretation."""
        self.interpreter.context = value

    # ---------- Public API ----------
    def start_listening(self) -> None:
        """Begin a new capture; ignored unless idle or finished."""
        if not self.state.accepts_start:
            logger.warning(f"Ignoring start_listening while {self.state.value}")
            return

        self.transcript = ""
        self.interim_transcript = ""
        self.error = None
        self.result = None

        if self.source is None:
            self._fail(NOT_SUPPORTED_MESSAGE)
            return

        self.source.subscribe(self._handle_event)
        self._set_state(SessionState.LISTENING)
        try:
            self.source.start()
        except Exception as e:
            logger.exception(f"Speech source failed to start: {e}")
            self.source.unsubscribe(self._handle_event)
            self._fail(START_FAILED_MESSAGE)

    def stop_listening(self) -> None:
        """Stop capturing; the source then ends the capture and processing starts."""
        if self.state != SessionState.LISTENING or self.source is None:
            return
        self.source.stop()

    def cancel(self) -> None:
        """Abort the capture and discard the transcript without interpreting it."""
        if self.state == SessionState.IDLE:
            return

        if self.source is not None:
            # Unsubscribe first so the abort notification is not seen as an error
            self.source.unsubscribe(self._handle_event)
            try:
                self.source.abort()
            except Exception as e:
                logger.warning(f"Speech source abort failed: {e}")

        self.transcript = ""
        self.interim_transcript = ""
        self._set_state(SessionState.IDLE)

    def reset(self) -> None:
        """Cancel and forget the last error and result."""
        self.cancel()
        self.error = None
        self.result = None

    # ---------- Event handling ----------
    def _handle_event(self, event: TranscriptEvent) -> None:
        if self.state != SessionState.LISTENING:
            logger.debug(f"Ignoring {type(event).__name__} while {self.state.value}")
            return

        if isinstance(event, CaptureStarted):
            logger.debug("Capture started")
        elif isinstance(event, PartialTranscript):
            self.interim_transcript = event.text
        elif isinstance(event, FinalTranscript):
            text = event.text.strip()
            if text:
                self.transcript = f"{self.transcript} {text}" if self.transcript else text
            self.interim_transcript = ""
        elif isinstance(event, CaptureEnded):
            self._finish_capture()
        elif isinstance(event, CaptureFailed):
            self._capture_failed(event)
        else:
            logger.warning(f"Unknown transcript event: {event!r}")

    def _finish_capture(self) -> None:
        self.source.unsubscribe(self._handle_event)

        text = (self.transcript or self.interim_transcript).strip()
        if not text:
            logger.info("Capture ended without speech")
            self._set_state(SessionState.IDLE)
            return

        self.transcript = text
        self._set_state(SessionState.PROCESSING)
        try:
            result = self.interpreter.execute(text, self.command_type)
        except Exception as e:
            logger.exception(f"Interpreting \"{text}\" failed: {e}")
            self._fail(NOT_UNDERSTOOD_MESSAGE)
            return
        self.result = result

        if result.success:
            self._set_state(SessionState.SUCCESS)
        else:
            self.error = result.error or NOT_UNDERSTOOD_MESSAGE
            self._set_state(SessionState.ERROR)

        self._notify(self.on_result, result)

    def _capture_failed(self, event: CaptureFailed) -> None:
        self.source.unsubscribe(self._handle_event)

        if event.is_aborted:
            self._set_state(SessionState.IDLE)
            return

        logger.error(f"Speech capture error: {event.code}")
        self._fail(CAPTURE_ERROR_MESSAGES.get(event.code, UNKNOWN_CAPTURE_ERROR_MESSAGE))

    # ---------- Helpers ----------
    def _fail(self, message: str) -> None:
        self.error = message
        self._set_state(SessionState.ERROR)
        self._notify(self.on_error, message)

    def _set_state(self, state: SessionState) -> None:
        if state != self.state:
            logger.info(f"Voice session: {self.state.value} -> {state.value}")
        self.state = state

    @staticmethod
    @handle_exceptions(message="Voice command callback failed")
    def _notify(callback: Optional[Callable], payload) -> None:
        if callback is not None:
            callback(payload)
