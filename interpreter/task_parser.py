"""Voice transcript -> task state transition."""
from __future__ import annotations

from typing import List, Optional

from loguru import logger

from core.error_handler import log_execution_time, result_boundary
from core.result import Failure, Result, Success

from .classifier import detect_task_action
from .entity_matcher import extract_task_name, match_task, suggest_similar
from .models import ParsedTaskCommand, TaskContext, TaskUpdates, round_confidence
from .text_normalizer import normalize
from .text_utils import first_phrase
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

# Status a task is expected to be in after each action
IMPLIED_STATUS = {
    "complete": "completed",
    "start": "in_progress",
}

ALREADY_IN_STATUS_WARNINGS = {
    "complete": "This task is already marked as complete",
    "start": "This task is already in progress",
}

DEFAULT_NOT_FOUND_SUGGESTIONS = (
    "Try saying the task name more clearly",
    "Make sure the task exists in the current project",
)

EXAMPLE_TASK_COMMANDS = (
    "Mark drywall installation complete",
    "Complete the framing task",
    "Start working on electrical rough-in",
    "Mark kitchen cabinets as done",
    "Put the roofing task on hold",
)


def extract_updates(transcript: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> Optional[TaskUpdates]:
    """Status and priority changes spoken in the transcript, if any.

    The first status (in table order) with a keyword present wins, then the
    first matching priority.
    """
    text = normalize(transcript)

    status = None
    for candidate, keywords in vocabulary.task_status_keywords.items():
        if first_phrase(text, keywords):
            status = candidate
            break

    priority = None
    for candidate, keywords in vocabulary.task_priority_keywords.items():
        if first_phrase(text, keywords):
            priority = candidate
            break

    updates = TaskUpdates(status=status, priority=priority)
    return None if updates.is_empty else updates


@result_boundary("Failed to interpret task command")
@log_execution_time()
def parse_task_voice(
    transcript: str,
    context: TaskContext,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> Result:
    """
    Parse a spoken task command.

    Args:
        transcript: Raw transcript, e.g. "Mark drywall installation complete"
        context: Tasks of the current project
        vocabulary: Keyword tables

    Returns:
        Success(ParsedTaskCommand) or Failure with suggestions
    """
    if not transcript or not transcript.strip():
        return Failure("No transcript provided")

    action, action_confidence = detect_task_action(transcript, vocabulary)
    match = match_task(transcript, context.tasks, action, vocabulary)

    if match is None:
        extracted = extract_task_name(transcript, action, vocabulary)
        similar = suggest_similar(extracted, context.tasks)
        if similar:
            suggestions = (f"Did you mean: {', '.join(similar)}?",)
        else:
            suggestions = DEFAULT_NOT_FOUND_SUGGESTIONS
        logger.info(f"No task matched '{extracted}' among {len(context.tasks)} tasks")
        return Failure(f'Could not find a matching task for "{extracted}"', suggestions)

    warnings: List[str] = []
    task = next((t for t in context.tasks if t.id == match.id), None)
    if task is not None and action in IMPLIED_STATUS and task.status == IMPLIED_STATUS[action]:
        warnings.append(ALREADY_IN_STATUS_WARNINGS[action])

    updates = extract_updates(transcript, vocabulary)
    if updates is None and action == "complete":
        updates = TaskUpdates(status="completed")

    confidence = action_confidence * 0.4 + match.confidence * 0.6

    return Success(ParsedTaskCommand(
        action=action,
        confidence=round_confidence(confidence),
        raw_transcript=transcript,
        task_id=match.id,
        task_title=match.label,
        updates=updates,
        warnings=warnings,
    ))


def get_task_command_suggestions() -> List[str]:
    """Generic tips for phrasing task commands."""
    return [
        'Start with the action, like "Mark" or "Complete"',
        "Include the task name or key words from it",
        "Be specific about which task you mean",
    ]
