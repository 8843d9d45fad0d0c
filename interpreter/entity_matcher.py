"""
Entity matching for the voice command interpreter.

This module resolves free text to the closest roster entry (project or task)
or to a trade category from the activity taxonomy. All scoring goes through
the shared similarity engine so every matcher ranks candidates the same way.

Functions:
    match_project: Best project for a transcript, preferring live projects
    match_task: Best task for a transcript given the detected action
    match_activity: Best trade category from the activity taxonomy
    extract_task_name: Strip action and filler words to isolate a task name
    suggest_similar: Near-miss labels for "did you mean" suggestions

Scoring ladder (the maximum wins, the first roster entry wins ties):
    1. Direct containment of the label in the transcript (or of the focused
       query in the label) -> 0.95
    2. Whole-name similarity above 0.6 -> similarity x 0.9 (projects) or
       x 0.95 (tasks)
    3. Word overlap above 0.5 -> overlap x 0.85
    4. Per-word fuzzy match on longer tokens -> 0.7 to 0.85
"""
from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence

from loguru import logger

from .models import MatchCandidate, RosterEntry
from .similarity import best_word_similarity, similarity, word_overlap
from .text_normalizer import collapse_whitespace, normalize
from .text_utils import capitalize, contains_phrase
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

CONTAINMENT_CONFIDENCE = 0.95
NAME_SIMILARITY_THRESHOLD = 0.6
PROJECT_NAME_WEIGHT = 0.9
TASK_NAME_WEIGHT = 0.95
OVERLAP_THRESHOLD = 0.5
OVERLAP_WEIGHT = 0.85
TASK_WORD_CONFIDENCE = 0.7
SUGGESTION_FLOOR = 0.3


class _BestMatch:
    """Keeps the highest scoring candidate; earlier candidates win ties."""

    def __init__(self) -> None:
        self.candidate: Optional[MatchCandidate] = None

    def offer(self, entry_id: str, label: str, confidence: float) -> None:
        if confidence <= 0:
            return
        if self.candidate is None or confidence > self.candidate.confidence:
            self.candidate = MatchCandidate(id=entry_id, label=label, confidence=confidence)


def _indicator_tails(words: List[str], indicators: Iterable[str]) -> List[List[str]]:
    """Words following the first occurrence of each project indicator."""
    tails = []
    for indicator in indicators:
        if indicator in words:
            index = words.index(indicator)
            if index < len(words) - 1:
                tails.append(words[index + 1:])
    return tails


def live_projects(projects: Sequence[RosterEntry], vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> Sequence[RosterEntry]:
    """Projects in a live status, or the full roster when none is live."""
    live = [p for p in projects if (p.status or "").lower() in vocabulary.live_project_statuses]
    return live if live else projects


def match_project(
    transcript: str,
    projects: Sequence[RosterEntry],
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> Optional[MatchCandidate]:
    """
    Find the project a transcript refers to.

    The text following a project indicator ("at", "on", "for", "job", ...)
    is compared with each project name as a whole, by word overlap and word
    by word. Long transcript words are also compared with long name words
    anywhere in the transcript as a last resort.

    Args:
        transcript: Raw transcript
        projects: Project roster
        vocabulary: Indicator words and live statuses

    Returns:
        Best MatchCandidate or None
    """
    normalized = normalize(transcript)
    if not normalized or not projects:
        return None

    words = normalized.split()
    tails = _indicator_tails(words, vocabulary.project_indicators)
    best = _BestMatch()

    for project in live_projects(projects, vocabulary):
        label = normalize(project.name)
        if not label:
            continue

        if label in normalized:
            best.offer(project.id, project.name, CONTAINMENT_CONFIDENCE)
            continue

        label_words = label.split()
        for tail in tails:
            query = " ".join(tail)
            name_score = similarity(query, label)
            if name_score > NAME_SIMILARITY_THRESHOLD:
                best.offer(project.id, project.name, name_score * PROJECT_NAME_WEIGHT)

            overlap = word_overlap(query, label)
            if overlap > OVERLAP_THRESHOLD:
                best.offer(project.id, project.name, overlap * OVERLAP_WEIGHT)

            word_score = best_word_similarity(label_words, tail, min_length=3)
            if word_score > 0.85:
                best.offer(project.id, project.name, word_score * 0.85)

        word_score = best_word_similarity(label_words, words, min_length=4)
        if word_score > 0.9:
            best.offer(project.id, project.name, word_score * 0.75)

    if best.candidate:
        logger.debug(f"Project match: '{best.candidate.label}' ({best.candidate.confidence:.2f})")
    else:
        logger.debug(f"No project match in: '{transcript}'")
    return best.candidate


def extract_task_name(transcript: str, action: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> str:
    """
    Isolate the task name by removing action keywords and filler words.

    "Mark drywall installation complete" -> "drywall installation"
    """
    cleaned = normalize(transcript)

    keywords = sorted(vocabulary.task_action_keywords.get(action, ()), key=len, reverse=True)
    for keyword in keywords:
        cleaned = re.sub(rf"\b{re.escape(keyword)}\b", " ", cleaned)

    for filler in vocabulary.task_filler_words:
        cleaned = re.sub(rf"\b{re.escape(filler)}\b", " ", cleaned)

    return collapse_whitespace(cleaned)


def match_task(
    transcript: str,
    tasks: Sequence[RosterEntry],
    action: str,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> Optional[MatchCandidate]:
    """
    Find the task a transcript refers to.

    Args:
        transcript: Raw transcript
        tasks: Task roster
        action: Detected task action, used to strip action words
        vocabulary: Action keywords and filler words

    Returns:
        Best MatchCandidate or None
    """
    if not tasks:
        return None

    extracted = extract_task_name(transcript, action, vocabulary)
    normalized = normalize(transcript)
    transcript_words = normalized.split()
    best = _BestMatch()

    for task in tasks:
        label = normalize(task.name)
        if not label:
            continue

        if label in normalized or (extracted and extracted in label):
            best.offer(task.id, task.name, CONTAINMENT_CONFIDENCE)
            continue

        if extracted:
            name_score = similarity(extracted, label)
            if name_score > NAME_SIMILARITY_THRESHOLD:
                best.offer(task.id, task.name, name_score * TASK_NAME_WEIGHT)

            overlap = word_overlap(extracted, label)
            if overlap > OVERLAP_THRESHOLD:
                best.offer(task.id, task.name, overlap * OVERLAP_WEIGHT)

        if best_word_similarity(label.split(), transcript_words, min_length=4) > 0.85:
            best.offer(task.id, task.name, TASK_WORD_CONFIDENCE)

    if best.candidate:
        logger.debug(f"Task match: '{best.candidate.label}' ({best.candidate.confidence:.2f})")
    else:
        logger.debug(f"No task match for extracted name '{extracted}'")
    return best.candidate


def match_activity(transcript: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> Optional[MatchCandidate]:
    """
    Classify the trade activity mentioned in a transcript.

    A whole-word keyword hit scores 0.95 for keywords longer than four
    characters and 0.85 otherwise; a misspelt word close to a keyword scores
    its similarity x 0.9.
    """
    normalized = normalize(transcript)
    if not normalized:
        return None

    words = normalized.split()
    best = _BestMatch()

    for activity, keywords in vocabulary.activity_keywords.items():
        for keyword in keywords:
            if contains_phrase(normalized, keyword):
                best.offer(activity, capitalize(activity), 0.95 if len(keyword) > 4 else 0.85)
                break

            if " " in keyword:
                continue
            word_score = best_word_similarity([keyword], words, min_length=4)
            if word_score > 0.8:
                best.offer(activity, capitalize(activity), word_score * 0.9)

    return best.candidate


def suggest_similar(
    name: str,
    roster: Sequence[RosterEntry],
    limit: int = 3,
    floor: float = SUGGESTION_FLOOR,
) -> List[str]:
    """Labels of roster entries resembling ``name``, most similar first."""
    scored = [
        (similarity(name, entry.name), entry.name)
        for entry in roster
        if normalize(entry.name)
    ]
    scored = [item for item in scored if item[0] > floor]
    scored.sort(key=lambda item: item[0], reverse=True)
    return [label for _, label in scored[:limit]]
