"""Use cases for voice command interpretation.

Implements the use case layer following Clean Architecture principles,
encapsulating the dispatch from a finished transcript to the right domain
parser and the recording of interpreted commands.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from loguru import logger

from core.exceptions import ParsingError, VoiceCommandException
from core.result import Failure, Result, Success
from interpreter.classifier import CommandType, classify
from interpreter.daily_log_parser import parse_daily_log_voice
from interpreter.models import DailyLogContext, TaskContext, TimeEntryContext
from interpreter.task_parser import parse_task_voice
from interpreter.time_entry_parser import parse_time_entry_voice
from interpreter.vocabulary import DEFAULT_VOCABULARY, Vocabulary


@dataclass
class VoiceCommandsContext:
    """Per-session data the parsers need.

    Attributes:
        time_entry: Projects available for time entries
        daily_log: Project, date and earlier logs for daily logs
        task: Tasks of the current project
    """
    time_entry: Optional[TimeEntryContext] = None
    daily_log: Optional[DailyLogContext] = None
    task: Optional[TaskContext] = None


@dataclass
class VoiceCommandResult:
    """Outcome of one interpreted transcript.

    Attributes:
        type: Command type the transcript was dispatched to
        transcript: Transcript that was interpreted
        success: Whether a command was produced
        data: Parsed command on success
        error: User-facing error on failure
        suggestions: Hints for rephrasing after a failure
        timestamp: When the transcript was interpreted
    """
    type: CommandType
    transcript: str
    success: bool
    data: Any = None
    error: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now()

    @classmethod
    def from_result(cls, command_type: CommandType, transcript: str, result: Result) -> "VoiceCommandResult":
        if result.success:
            return cls(type=command_type, transcript=transcript, success=True, data=result.value)
        return cls(
            type=command_type,
            transcript=transcript,
            success=False,
            error=result.message,
            suggestions=list(result.suggestions),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = self.data.to_dict() if hasattr(self.data, "to_dict") else self.data
        return {
            "type": self.type.value,
            "transcript": self.transcript,
            "success": self.success,
            "data": data,
            "error": self.error,
            "suggestions": list(self.suggestions),
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


_MISSING_CONTEXT_ERRORS = {
    CommandType.TIME_ENTRY: "Time entry context not available",
    CommandType.DAILY_LOG: "Daily log context not available",
    CommandType.TASK: "Task context not available",
}


class InterpretTranscriptUseCase:
    """Use case for turning a finished transcript into a voice command.

    Classifies the transcript when the command type is ``auto`` and calls the
    matching domain parser with its context.
    """

    def __init__(self, context: VoiceCommandsContext, vocabulary: Vocabulary = DEFAULT_VOCABULARY):
        self.context = context
        self.vocabulary = vocabulary

    def resolve_type(self, transcript: str, command_type=CommandType.AUTO) -> CommandType:
        command_type = CommandType.parse(command_type)
        if command_type == CommandType.AUTO:
            return classify(transcript, self.vocabulary)
        return command_type

    def execute(self, transcript: str, command_type=CommandType.AUTO) -> VoiceCommandResult:
        """Interpret a transcript.

        Args:
            transcript: Complete transcript of the capture session
            command_type: Forced command type, or ``auto`` to classify

        Returns:
            VoiceCommandResult (never raises for bad input)
        """
        resolved = self.resolve_type(transcript, command_type)
        result = self._dispatch(resolved, transcript)

        if result.success:
            logger.info(f"[interpreted] {resolved.value}: '{transcript}' conf={result.value.confidence:.2f}")
        else:
            logger.info(f"[interpreted] {resolved.value} failed: {result.message}")

        return VoiceCommandResult.from_result(resolved, transcript, result)

    def _dispatch(self, command_type: CommandType, transcript: str) -> Result:
        if command_type == CommandType.TIME_ENTRY:
            if self.context.time_entry is None:
                return Failure(_MISSING_CONTEXT_ERRORS[command_type])
            return parse_time_entry_voice(transcript, self.context.time_entry, self.vocabulary)

        if command_type == CommandType.DAILY_LOG:
            if self.context.daily_log is None:
                return Failure(_MISSING_CONTEXT_ERRORS[command_type])
            return parse_daily_log_voice(transcript, self.context.daily_log, self.vocabulary)

        if command_type == CommandType.TASK:
            if self.context.task is None:
                return Failure(_MISSING_CONTEXT_ERRORS[command_type])
            return parse_task_voice(transcript, self.context.task, self.vocabulary)

        raise ParsingError(f"Unsupported command type: {command_type}")


class RecordCommandUseCase:
    """Use case for recording an interpreted command in the session log."""

    def __init__(self, session_logger=None):
        self.session_logger = session_logger

    def execute(self, command: VoiceCommandResult) -> Result[VoiceCommandResult, VoiceCommandException]:
        """Record a command.

        Returns:
            Result containing the command on success or VoiceCommandException on failure
        """
        if self.session_logger is None:
            return Success(command)
        try:
            self.session_logger.log_command(command.to_dict())
            return Success(command)
        except Exception as e:
            logger.error(f"Failed to record voice command: {e}")
            return Failure(VoiceCommandException(f"Failed to record: {e}"))
