"""
Voice transcript -> daily field log.

A daily log transcript is free-form narration ("Today was sunny and 75
degrees. We had 5 crew members on site. Completed framing on the second
floor."). Each piece of information is extracted independently:

    weather        condition by longest keyword, temperature from digits
    crew           head count and, when spoken with capitals, crew names
    work performed one item per sentence mentioning work or a trade
    issues         one item per sentence mentioning a problem, with severity
    category       keyword scoring across the log categories
    title          first sentence when short, else a category label

None of the extractors fail; missing information only lowers confidence and
adds a warning.
"""
from __future__ import annotations

import re
from datetime import date as date_cls
from typing import Dict, List, Optional, Tuple

from loguru import logger

from core.error_handler import log_execution_time, result_boundary
from core.result import Failure, Result, Success

from .models import DailyLogContext, LogIssue, ParsedDailyLog, WeatherReport, round_confidence
from .text_normalizer import normalize
from .text_utils import capitalize, contains_phrase, first_phrase, split_sentences
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

MAX_CONFIDENCE = 0.95
MAX_TITLE_LENGTH = 80
MIN_CATEGORY_SCORE = 3
TEMPERATURE_RANGE = (-50, 130)

_SPOKEN_COUNT = (
    r"\d+|one|two|three|four|five|six|seven|eight|nine|ten|eleven|twelve"
    r"|thirteen|fourteen|fifteen"
)
_CREW_PATTERNS = (
    re.compile(rf"\b({_SPOKEN_COUNT})\s*(?:crew(?:\s*members?)?|guys?|people|workers?|men|team\s*members?)\b"),
    re.compile(rf"\b(?:crew|team)\s*(?:of|was|is|had)?\s*\b({_SPOKEN_COUNT})\b"),
    re.compile(rf"\b(?:had|with|there were|there was)\s+({_SPOKEN_COUNT})\b"),
)
_CREW_NAME_PATTERNS = (
    re.compile(r"\b(?:including|with|were|was)\s+([A-Z][a-z]+(?:\s*(?:,|and)\s*[A-Z][a-z]+)*)"),
    re.compile(r"\b([A-Z][a-z]+(?:\s*(?:,|and)\s*[A-Z][a-z]+)+)\s+(?:were|worked)\b"),
)
_CREW_NAME_SEPARATOR = re.compile(r",|\band\b")

_DEGREES = re.compile(r"\b(\d+)\s*(?:degrees?|deg)\b")
_SPOKEN_TEMPERATURE = re.compile(r"\b(?:temp(?:erature)?|it(?: s| is| was)?)\s*(?:about|around)?\s*(\d+)\b")
_HIGH_TEMPERATURE = re.compile(r"\bhigh\s*(?:of|was|is)?\s*(\d+)\b")
_LOW_TEMPERATURE = re.compile(r"\blow\s*(?:of|was|is)?\s*(\d+)\b")

_WORK_SUBJECT_PREFIX = re.compile(r"^(?:we|they|team|crew)\s+", re.IGNORECASE)
_WORK_TIME_PREFIX = re.compile(r"^(?:today|this morning|this afternoon)\s*,?\s*", re.IGNORECASE)
_SAFETY_ISSUE = re.compile(r"safety|injury|accident|hazard")

EXAMPLE_DAILY_LOG_COMMANDS = (
    "Today was sunny and 75 degrees. We had 5 crew members on site. "
    "Completed framing on the second floor and started rough electrical.",
    "Weather was rainy so we focused on interior work. 3 guys on site. "
    "Finished drywall in the master bedroom. Material delivery was delayed until tomorrow.",
    "Clear skies, 68 degrees. Team of 4 worked on exterior siding. "
    "Had an issue with some damaged materials that needed replacement.",
    "Inspection day. Inspector passed the electrical rough-in. "
    "Crew of 6 continued with plumbing installation.",
)


def _in_range(value: int) -> bool:
    low, high = TEMPERATURE_RANGE
    return low <= value <= high


def extract_temperatures(transcript: str) -> Tuple[Optional[int], Optional[int]]:
    """
    High and low temperature mentioned in a transcript.

    "75 degrees", "temperature around 75", "it was 75" and "high of 75" set
    the high; "low of 50" sets the low.

    Returns:
        (temperature_high, temperature_low); either may be None
    """
    text = normalize(transcript)

    low_match = _LOW_TEMPERATURE.search(text)
    low = int(low_match.group(1)) if low_match else None
    if low is not None and not _in_range(low):
        low = None
    low_span = low_match.span(1) if low is not None else None

    for pattern in (_HIGH_TEMPERATURE, _DEGREES, _SPOKEN_TEMPERATURE):
        for match in pattern.finditer(text):
            if match.span(1) == low_span:
                continue
            value = int(match.group(1))
            if _in_range(value):
                return value, low

    return None, low


def parse_weather(transcript: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> Optional[WeatherReport]:
    """Weather condition (longest keyword wins) plus any temperature."""
    text = normalize(transcript)

    condition = None
    best_length = 0
    for weather_type, keywords in vocabulary.weather_keywords.items():
        for keyword in keywords:
            if len(keyword) > best_length and contains_phrase(text, keyword):
                condition = weather_type
                best_length = len(keyword)

    if condition is None:
        return None

    high, low = extract_temperatures(transcript)
    return WeatherReport(condition=condition, temperature_high=high, temperature_low=low)


def parse_crew(transcript: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> Tuple[Optional[int], Optional[List[str]]]:
    """
    Crew head count and crew member names.

    Names are only recognised from the raw (capitalized) transcript, e.g.
    "Crew was Mike, Dave and Luis".

    Returns:
        (crew_count, crew_members)
    """
    text = normalize(transcript)

    crew_count = None
    for pattern in _CREW_PATTERNS:
        match = pattern.search(text)
        if match:
            spoken = match.group(1)
            crew_count = vocabulary.number_words[spoken] if spoken in vocabulary.number_words else int(spoken)
            break

    crew_members = None
    for pattern in _CREW_NAME_PATTERNS:
        match = pattern.search(transcript or "")
        if match:
            names = [name.strip() for name in _CREW_NAME_SEPARATOR.split(match.group(1))]
            crew_members = [name for name in names if name] or None
            break

    return crew_count, crew_members


def parse_work_performed(transcript: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> List[str]:
    """Work items, one per sentence that mentions work or a trade."""
    items = []
    for sentence in split_sentences(transcript):
        sentence_text = normalize(sentence)
        mentions_work = (
            first_phrase(sentence_text, vocabulary.work_indicators)
            or first_phrase(sentence_text, vocabulary.work_activities)
        )
        if not mentions_work:
            continue

        item = _WORK_SUBJECT_PREFIX.sub("", sentence)
        item = _WORK_TIME_PREFIX.sub("", item).strip()
        if item:
            items.append(item)

    if not items:
        text = normalize(transcript)
        items = [
            f"Worked on {activity}"
            for activity in vocabulary.work_activities
            if contains_phrase(text, activity)
        ]

    return items


def parse_issues(transcript: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> List[LogIssue]:
    """Issues, one per sentence with a problem indicator."""
    issues = []
    for sentence in split_sentences(transcript):
        sentence_text = normalize(sentence)
        if not first_phrase(sentence_text, vocabulary.issue_indicators):
            continue

        severity = "medium"
        for level, keywords in vocabulary.issue_severity_keywords.items():
            if first_phrase(sentence_text, keywords):
                severity = level
                break

        resolved = bool(first_phrase(sentence_text, vocabulary.resolved_keywords))
        issues.append(LogIssue(description=sentence.strip(), severity=severity, resolved=resolved))

    return issues


def score_categories(
    transcript: str,
    issues: List[LogIssue],
    weather: Optional[WeatherReport],
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> Dict[str, int]:
    """Category scores: summed keyword lengths plus boosts from parsed content."""
    text = normalize(transcript)

    scores = {category: 0 for category in vocabulary.daily_log_category_keywords}
    for category, keywords in vocabulary.daily_log_category_keywords.items():
        for keyword in keywords:
            if contains_phrase(text, keyword):
                scores[category] += len(keyword)

    if issues:
        if any(_SAFETY_ISSUE.search(normalize(issue.description)) for issue in issues):
            scores["safety"] = scores.get("safety", 0) + 20
        else:
            scores["issue"] = scores.get("issue", 0) + 10

    if weather is not None and scores.get("weather", 0) < 10:
        scores["weather"] = scores.get("weather", 0) + 5

    return scores


def determine_category(
    transcript: str,
    issues: List[LogIssue],
    weather: Optional[WeatherReport],
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> str:
    scores = score_categories(transcript, issues, weather, vocabulary)

    best_category = "progress"
    best_score = 0
    for category, score in scores.items():
        if score > best_score:
            best_category = category
            best_score = score

    if best_score < MIN_CATEGORY_SCORE:
        text = normalize(transcript)
        has_work = first_phrase(text, vocabulary.work_activities)
        return "progress" if has_work else "general"

    return best_category


def generate_title(
    transcript: str,
    category: str,
    work_performed: List[str],
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> str:
    sentences = split_sentences(transcript)
    if sentences and len(sentences[0]) <= MAX_TITLE_LENGTH:
        return sentences[0]

    label = vocabulary.daily_log_category_labels.get(category, "Daily Update")
    if work_performed:
        activity = first_phrase(normalize(work_performed[0]), vocabulary.work_activities)
        if activity:
            return f"{capitalize(activity)} {label}"
    return label


def _crew_warning(context: DailyLogContext) -> str:
    for previous in context.previous_logs or ():
        if previous.crew_count:
            return (
                "No crew count detected. "
                f"The previous log had {previous.crew_count} crew members."
            )
    return "No crew count detected. You may want to add crew information."


@result_boundary("Failed to interpret daily log")
@log_execution_time()
def parse_daily_log_voice(
    transcript: str,
    context: DailyLogContext,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> Result:
    """
    Parse a spoken end-of-day narration into a daily log.

    Args:
        transcript: Raw transcript
        context: Project the log belongs to, log date and earlier logs
        vocabulary: Keyword tables

    Returns:
        Success(ParsedDailyLog) or Failure for an empty transcript
    """
    if not transcript or not transcript.strip():
        return Failure("No transcript provided")

    weather = parse_weather(transcript, vocabulary)
    crew_count, crew_members = parse_crew(transcript, vocabulary)
    work_performed = parse_work_performed(transcript, vocabulary)
    issues = parse_issues(transcript, vocabulary)
    category = determine_category(transcript, issues, weather, vocabulary)
    title = generate_title(transcript, category, work_performed, vocabulary)

    confidence = 0.5
    if weather is not None:
        confidence += 0.1
    if crew_count:
        confidence += 0.1
    if work_performed:
        confidence += 0.15
    if issues:
        confidence += 0.1
    confidence = min(confidence, MAX_CONFIDENCE)

    warnings: List[str] = []
    if weather is None:
        warnings.append("No weather information detected. Consider adding weather conditions.")
    if not crew_count:
        warnings.append(_crew_warning(context))
    if not work_performed:
        warnings.append("No specific work activities detected.")

    logger.debug(
        f"Daily log for project '{context.project_name or context.project_id}': "
        f"category={category} weather={weather.condition if weather else None} "
        f"crew={crew_count} work_items={len(work_performed)} issues={len(issues)}"
    )

    return Success(ParsedDailyLog(
        date=context.date or date_cls.today().isoformat(),
        category=category,
        title=title,
        description=transcript.strip(),
        confidence=round_confidence(confidence),
        raw_transcript=transcript,
        weather=weather,
        crew_count=crew_count,
        crew_members=crew_members,
        work_performed=work_performed or None,
        issues=issues or None,
        warnings=warnings,
    ))


def get_daily_log_suggestions() -> List[str]:
    """Generic tips for a more complete daily log narration."""
    return [
        "Mention the weather conditions (sunny, rainy, etc.)",
        'Include crew count, like "we had 5 crew members"',
        'Describe work completed, like "finished framing on the second floor"',
        "Note any issues or delays encountered",
        "Include material deliveries if applicable",
    ]
