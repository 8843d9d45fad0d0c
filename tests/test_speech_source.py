"""Tests for the text-driven speech source."""
import pytest

from core.exceptions import CaptureError
from speech.events import (
    CaptureEnded,
    CaptureErrorCode,
    CaptureFailed,
    CaptureStarted,
    FinalTranscript,
    PartialTranscript,
)
from speech.source import TextSpeechSource


@pytest.fixture
def source():
    return TextSpeechSource()


@pytest.fixture
def events(source):
    received = []
    source.subscribe(received.append)
    return received


class TestTextSpeechSource:
    def test_start_emits_capture_started(self, source, events):
        # Act
        source.start()

        # Assert
        assert source.capturing
        assert events == [CaptureStarted()]

    def test_speak_sequence(self, source, events):
        source.start()
        source.speak(["Log 4 hours", "framing"], partial="Log four")

        assert events == [
            CaptureStarted(),
            PartialTranscript("Log four"),
            FinalTranscript("Log 4 hours"),
            FinalTranscript("framing"),
            CaptureEnded(),
        ]
        assert not source.capturing

    def test_stop_when_idle_is_noop(self, source, events):
        source.stop()

        assert events == []

    def test_abort_reports_aborted(self, source, events):
        source.start()
        source.abort()

        assert events[-1] == CaptureFailed("aborted")
        assert events[-1].is_aborted

    def test_fail_ends_capture(self, source, events):
        source.start()
        source.fail(CaptureErrorCode.NO_SPEECH.value)

        assert events[-1] == CaptureFailed("no-speech")
        assert not source.capturing

    def test_unavailable_source_raises(self):
        source = TextSpeechSource(available=False)

        with pytest.raises(CaptureError) as exc_info:
            source.start()

        assert exc_info.value.code == "audio-capture"

    def test_double_start_raises(self, source):
        source.start()

        with pytest.raises(CaptureError):
            source.start()

    def test_unsubscribe(self, source, events):
        source.unsubscribe(events.append)
        source.start()

        assert events == []

    def test_listener_may_unsubscribe_during_emit(self, source):
        # Arrange
        received = []

        def once(event):
            received.append(event)
            source.unsubscribe(once)

        source.subscribe(once)

        # Act
        source.start()
        source.feed("hello")

        # Assert
        assert received == [CaptureStarted()]


def test_event_finality():
    assert not PartialTranscript("a").is_final
    assert FinalTranscript("a").is_final
