"""
Voice Command Interpreter Package.

This package turns free-form transcripts spoken by contractors in the field
into structured commands: a time entry, a daily field log or a task state
transition. Interpretation is heuristic: keyword and pattern scoring for
intent, spoken-number parsing for quantities and edit-distance fuzzy matching
for project, task and trade names.

Main Components:
    classify: Decide whether a transcript is a time entry, daily log or task
    parse_time_entry_voice: Transcript -> ParsedTimeEntry
    parse_task_voice: Transcript -> ParsedTaskCommand
    parse_daily_log_voice: Transcript -> ParsedDailyLog
    parse_duration: Spoken durations ("two and a half hours") -> hours
    match_project / match_task / match_activity: Fuzzy entity resolution
    similarity: Shared string similarity used by every matcher
    Vocabulary: Immutable keyword tables injected into every parser

Design Philosophy:
    - Parsers are pure functions of (transcript, context, vocabulary)
    - Bad input yields a Failure with suggestions, never an exception
    - Every result carries a confidence and a list of warnings
"""

from __future__ import annotations

from .classifier import CommandType, classify, detect_task_action, score_command_types
from .daily_log_parser import (
    EXAMPLE_DAILY_LOG_COMMANDS,
    get_daily_log_suggestions,
    parse_daily_log_voice,
)
from .duration_parser import DurationParse, parse_duration
from .entity_matcher import match_activity, match_project, match_task, suggest_similar
from .models import (
    DailyLogContext,
    LogIssue,
    MatchCandidate,
    ParsedDailyLog,
    ParsedTaskCommand,
    ParsedTimeEntry,
    PreviousLog,
    RosterEntry,
    TaskContext,
    TaskUpdates,
    TimeEntryContext,
    WeatherReport,
)
from .similarity import similarity, word_overlap
from .task_parser import EXAMPLE_TASK_COMMANDS, get_task_command_suggestions, parse_task_voice
from .text_normalizer import normalize
from .time_entry_parser import EXAMPLE_COMMANDS, get_time_entry_suggestions, parse_time_entry_voice
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

__all__ = [
    # Classification
    "CommandType",
    "classify",
    "score_command_types",
    "detect_task_action",

    # Domain parsers
    "parse_time_entry_voice",
    "parse_task_voice",
    "parse_daily_log_voice",
    "get_time_entry_suggestions",
    "get_task_command_suggestions",
    "get_daily_log_suggestions",
    "EXAMPLE_COMMANDS",
    "EXAMPLE_TASK_COMMANDS",
    "EXAMPLE_DAILY_LOG_COMMANDS",

    # Building blocks
    "parse_duration",
    "DurationParse",
    "match_project",
    "match_task",
    "match_activity",
    "suggest_similar",
    "similarity",
    "word_overlap",
    "normalize",
    "Vocabulary",
    "DEFAULT_VOCABULARY",

    # Data model
    "RosterEntry",
    "MatchCandidate",
    "TimeEntryContext",
    "TaskContext",
    "DailyLogContext",
    "PreviousLog",
    "ParsedTimeEntry",
    "ParsedTaskCommand",
    "ParsedDailyLog",
    "TaskUpdates",
    "WeatherReport",
    "LogIssue",
]
