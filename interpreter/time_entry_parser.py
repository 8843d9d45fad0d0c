"""
Voice transcript -> time entry.

"Log 4 hours framing at Smith house" becomes a ParsedTimeEntry of 4 hours,
activity ``framing``, matched to the Smith House project, with a short
description built from whatever the transcript said besides those.
"""
from __future__ import annotations

import re
from typing import List, Optional

from loguru import logger

from core.error_handler import log_execution_time, result_boundary
from core.result import Failure, Result, Success

from .duration_parser import DurationParse, parse_duration
from .entity_matcher import match_activity, match_project
from .models import MatchCandidate, ParsedTimeEntry, TimeEntryContext, round_confidence
from .text_normalizer import collapse_whitespace, normalize
from .text_utils import capitalize
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

MAX_HOURS_PER_ENTRY = 24
LONG_ENTRY_HOURS = 12
SHORT_DESCRIPTION_LENGTH = 10

DURATION_WEIGHT = 0.5
ACTIVITY_WEIGHT = 0.25
PROJECT_WEIGHT = 0.25

_TIME_PREFIX = re.compile(r"^(?:time|hours?)\s+(?:(?:for|on|at)\b)?\s*")
_EDGE_PUNCTUATION = re.compile(r"^[\s,.-]+|[\s,.-]+$")

EXAMPLE_COMMANDS = (
    "Log 4 hours framing at Smith house",
    "Add 2 and a half hours drywall for Johnson project",
    "Record thirty minutes meeting at Oak Street renovation",
    "Put 8 hours electrical work on the Thompson job",
    "Enter 1.5 hours painting at Maple Avenue house",
)


def _build_description(
    duration: DurationParse,
    activity: Optional[MatchCandidate],
    project: Optional[MatchCandidate],
    vocabulary: Vocabulary,
) -> str:
    """Whatever the speaker said besides the duration, verb and project."""
    description = duration.remaining_text

    verbs = "|".join(re.escape(v) for v in vocabulary.time_entry_command_verbs)
    description = re.sub(rf"^(?:{verbs})\s+", "", description)
    description = _TIME_PREFIX.sub("", description)

    if project is not None:
        name = re.escape(normalize(project.label))
        description = re.sub(
            rf"\b(?:(?:at|on|for|the)\s+)?{name}\b(?:\s*(?:project|job|site|house)\b)?",
            "",
            description,
        )

    for indicator in vocabulary.project_indicators:
        description = re.sub(rf"\b{re.escape(indicator)}\b\s*$", "", description)

    description = _EDGE_PUNCTUATION.sub("", collapse_whitespace(description))

    if activity is not None and len(description) < SHORT_DESCRIPTION_LENGTH:
        label = capitalize(activity.id)
        description = f"{label} - {description}" if description else label

    if description:
        return description
    return activity.id if activity is not None else "Time entry"


@result_boundary("Failed to interpret time entry")
@log_execution_time()
def parse_time_entry_voice(
    transcript: str,
    context: TimeEntryContext,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> Result:
    """
    Parse a spoken time entry.

    Args:
        transcript: Raw transcript, e.g. "Log 4 hours framing at Smith house"
        context: Projects the time may be logged against
        vocabulary: Keyword tables

    Returns:
        Success(ParsedTimeEntry) or Failure with suggestions
    """
    if not transcript or not transcript.strip():
        return Failure("No transcript provided")

    warnings: List[str] = []

    duration = parse_duration(transcript, vocabulary)
    if duration.hours <= 0:
        return Failure(
            "Could not understand the time duration",
            (
                'Try saying the number of hours, like "4 hours" or "30 minutes"',
                'You can say "two and a half hours" for partial hours',
            ),
        )

    hours = round(duration.hours, 2)
    if duration.hours > MAX_HOURS_PER_ENTRY:
        logger.info(f"Rejected time entry of {hours} hours")
        return Failure(
            f"{hours:g} hours seems too high. Did you mean something else?",
            ("Maximum time entry is 24 hours per entry",),
        )

    if duration.hours > LONG_ENTRY_HOURS:
        warnings.append("This is a long time entry. Please verify the hours are correct.")

    activity = match_activity(transcript, vocabulary)
    project = match_project(transcript, context.projects, vocabulary)

    if project is None and context.projects:
        warnings.append("Could not match a project. You may need to select one manually.")

    description = _build_description(duration, activity, project, vocabulary)

    confidence = duration.confidence * DURATION_WEIGHT
    if activity is not None:
        confidence += activity.confidence * ACTIVITY_WEIGHT
    if project is not None:
        confidence += project.confidence * PROJECT_WEIGHT

    return Success(ParsedTimeEntry(
        hours=hours,
        description=description,
        confidence=round_confidence(confidence),
        raw_transcript=transcript,
        project_id=project.id if project else None,
        project_name=project.label if project else None,
        activity_type=activity.id if activity else None,
        warnings=warnings,
    ))


def get_time_entry_suggestions(transcript: str) -> List[str]:
    """Tips for whatever a time entry transcript seems to be missing."""
    text = (transcript or "").lower()
    suggestions = []

    if not re.search(r"\d|one|two|three|four|five|six|seven|eight|nine|ten", text):
        suggestions.append('Include the number of hours, like "4 hours"')

    if not any(indicator in text for indicator in DEFAULT_VOCABULARY.project_indicators):
        suggestions.append('Specify the project, like "at Smith house" or "for Johnson renovation"')

    has_activity = any(
        keyword in text
        for keywords in DEFAULT_VOCABULARY.activity_keywords.values()
        for keyword in keywords
    )
    if not has_activity:
        suggestions.append('Include what you worked on, like "framing" or "drywall"')

    return suggestions
