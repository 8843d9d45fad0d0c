"""Command type classification and task action detection."""
from __future__ import annotations

import re
from enum import Enum
from typing import Dict, Tuple

from loguru import logger

from .text_normalizer import normalize
from .text_utils import contains_phrase
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

MAX_ACTION_CONFIDENCE = 0.95
DEFAULT_TASK_ACTION = "complete"

_DURATION_BONUS = re.compile(r"\d+\s*(?:hours?|hrs?|minutes?|mins?)")
_MARK_DONE_BONUS = re.compile(r"mark.*(?:complete|done|finished)")
_DAILY_LOG_BONUS = re.compile(r"(?:today|weather|crew|inspection|delivery)")


class CommandType(str, Enum):
    TIME_ENTRY = "time_entry"
    DAILY_LOG = "daily_log"
    TASK = "task"
    AUTO = "auto"

    @classmethod
    def parse(cls, value) -> "CommandType":
        """Accept a CommandType, its value or None (auto)."""
        if value is None:
            return cls.AUTO
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


def score_command_types(transcript: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> Dict[CommandType, int]:
    """
    Keyword scores per command type.

    Each keyword found anywhere in the transcript (substring match) adds one
    point. Explicit patterns add bonuses: a number followed by a time unit
    (+3 time entry), "mark ... complete/done/finished" (+3 task) and a daily
    log cue word (+2 daily log).
    """
    text = normalize(transcript)

    scores = {
        CommandType.TIME_ENTRY: sum(1 for k in vocabulary.time_entry_keywords if k in text),
        CommandType.DAILY_LOG: sum(1 for k in vocabulary.daily_log_keywords if k in text),
        CommandType.TASK: sum(1 for k in vocabulary.task_keywords if k in text),
    }

    if _DURATION_BONUS.search(text):
        scores[CommandType.TIME_ENTRY] += 3
    if _MARK_DONE_BONUS.search(text):
        scores[CommandType.TASK] += 3
    if _DAILY_LOG_BONUS.search(text):
        scores[CommandType.DAILY_LOG] += 2

    return scores


def classify(transcript: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> CommandType:
    """
    Decide which kind of command a transcript is.

    Ties go to time entry first, then task, then daily log.

    >>> classify("Log 4 hours framing")
    <CommandType.TIME_ENTRY: 'time_entry'>
    """
    scores = score_command_types(transcript, vocabulary)
    time_entry = scores[CommandType.TIME_ENTRY]
    daily_log = scores[CommandType.DAILY_LOG]
    task = scores[CommandType.TASK]

    if time_entry >= daily_log and time_entry >= task:
        command_type = CommandType.TIME_ENTRY
    elif task >= daily_log:
        command_type = CommandType.TASK
    else:
        command_type = CommandType.DAILY_LOG

    logger.debug(
        f"Classified '{transcript}' as {command_type.value} "
        f"(time_entry={time_entry}, daily_log={daily_log}, task={task})"
    )
    return command_type


def detect_task_action(transcript: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> Tuple[str, float]:
    """
    Detect which task action the speaker asked for.

    Every action keyword found as a whole phrase scores
    ``len(keyword) / len(transcript) + 0.5`` (capped at 0.95); the best
    scoring action wins. Without any keyword the action defaults to
    ``complete`` with confidence 0.

    Returns:
        (action, confidence)
    """
    text = normalize(transcript)
    if not text:
        return DEFAULT_TASK_ACTION, 0.0

    best_action = DEFAULT_TASK_ACTION
    best_score = 0.0
    for action, keywords in vocabulary.task_action_keywords.items():
        for keyword in keywords:
            if not contains_phrase(text, keyword):
                continue
            score = min(len(keyword) / len(text) + 0.5, MAX_ACTION_CONFIDENCE)
            if score > best_score:
                best_action = action
                best_score = score

    return best_action, best_score
