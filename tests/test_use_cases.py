"""Unit tests for use cases."""
import pytest
from unittest.mock import Mock, patch
from datetime import datetime

from app.use_cases import (
    InterpretTranscriptUseCase,
    RecordCommandUseCase,
    VoiceCommandResult,
    VoiceCommandsContext,
)
from core.exceptions import ParsingError, VoiceCommandException
from core.result import Failure, Success
from interpreter.classifier import CommandType
from interpreter.models import DailyLogContext, TaskContext, TimeEntryContext


@pytest.fixture
def context():
    return VoiceCommandsContext(
        time_entry=TimeEntryContext(projects=[{"id": "p1", "name": "Smith House", "status": "active"}]),
        daily_log=DailyLogContext(project_id="p1", date="2024-05-01"),
        task=TaskContext(tasks=[{"id": "t1", "title": "Drywall Installation", "status": "pending"}]),
    )


class TestInterpretTranscriptUseCase:
    """Tests for InterpretTranscriptUseCase."""

    def test_auto_classifies_time_entry(self, context):
        # Arrange
        use_case = InterpretTranscriptUseCase(context)

        # Act
        result = use_case.execute("Log 4 hours framing at Smith house")

        # Assert
        assert result.success
        assert result.type == CommandType.TIME_ENTRY
        assert result.data.hours == 4
        assert result.error is None

    def test_auto_classifies_task(self, context):
        result = InterpretTranscriptUseCase(context).execute("Mark drywall installation complete")

        assert result.type == CommandType.TASK
        assert result.data.task_id == "t1"

    def test_auto_classifies_daily_log(self, context):
        result = InterpretTranscriptUseCase(context).execute("Today was sunny, 5 crew")

        assert result.type == CommandType.DAILY_LOG
        assert result.data.crew_count == 5

    def test_forced_type_skips_classifier(self, context):
        # Arrange
        use_case = InterpretTranscriptUseCase(context)

        # Act
        with patch("app.use_cases.classify") as mock_classify:
            result = use_case.execute("Log 4 hours framing", CommandType.DAILY_LOG)

        # Assert
        mock_classify.assert_not_called()
        assert result.type == CommandType.DAILY_LOG

    def test_forced_type_as_string(self, context):
        result = InterpretTranscriptUseCase(context).execute("Mark drywall installation complete", "task")

        assert result.type == CommandType.TASK

    @pytest.mark.parametrize("command_type,message", [
        (CommandType.TIME_ENTRY, "Time entry context not available"),
        (CommandType.DAILY_LOG, "Daily log context not available"),
        (CommandType.TASK, "Task context not available"),
    ])
    def test_missing_context(self, command_type, message):
        result = InterpretTranscriptUseCase(VoiceCommandsContext()).execute("anything", command_type)

        assert not result.success
        assert result.error == message

    def test_failure_carries_suggestions(self, context):
        result = InterpretTranscriptUseCase(context).execute("Log framing at Smith house", CommandType.TIME_ENTRY)

        assert not result.success
        assert result.error == "Could not understand the time duration"
        assert len(result.suggestions) == 2

    def test_unresolved_type_raises(self, context):
        with pytest.raises(ParsingError):
            InterpretTranscriptUseCase(context)._dispatch(CommandType.AUTO, "Log 4 hours")


class TestVoiceCommandResult:
    def test_to_dict(self):
        # Arrange
        data = Mock()
        data.to_dict.return_value = {"hours": 4}
        result = VoiceCommandResult(
            type=CommandType.TIME_ENTRY,
            transcript="Log 4 hours",
            success=True,
            data=data,
            timestamp=datetime(2024, 5, 1, 17, 30),
        )

        # Act
        payload = result.to_dict()

        # Assert
        assert payload == {
            "type": "time_entry",
            "transcript": "Log 4 hours",
            "success": True,
            "data": {"hours": 4},
            "error": None,
            "suggestions": [],
            "timestamp": "2024-05-01T17:30:00",
        }

    def test_from_failure(self):
        result = VoiceCommandResult.from_result(CommandType.TASK, "Mark it", Failure("nope", ("try again",)))

        assert result.success is False
        assert result.error == "nope"
        assert result.suggestions == ["try again"]
        assert result.timestamp is not None


class TestRecordCommandUseCase:
    """Tests for RecordCommandUseCase."""

    def _command(self):
        return VoiceCommandResult.from_result(CommandType.TASK, "Mark it", Success({"task_id": "t1"}))

    def test_successful_recording(self):
        # Arrange
        mock_session_logger = Mock()
        use_case = RecordCommandUseCase(mock_session_logger)
        command = self._command()

        # Act
        result = use_case.execute(command)

        # Assert
        assert result.is_success()
        assert result.unwrap() is command
        mock_session_logger.log_command.assert_called_once()
        logged = mock_session_logger.log_command.call_args[0][0]
        assert logged["type"] == "task"
        assert logged["data"] == {"task_id": "t1"}

    def test_recording_failure(self):
        # Arrange
        mock_session_logger = Mock()
        mock_session_logger.log_command.side_effect = OSError("disk full")
        use_case = RecordCommandUseCase(mock_session_logger)

        # Act
        result = use_case.execute(self._command())

        # Assert
        assert result.is_failure()
        assert isinstance(result.error, VoiceCommandException)

    def test_without_session_logger(self):
        result = RecordCommandUseCase().execute(self._command())

        assert result.is_success()
