"""Duration parsing: hours and minutes spoken in a transcript."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from loguru import logger

from .text_normalizer import collapse_whitespace, normalize_numeric
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

DIGIT_CONFIDENCE = 0.95
COMPOUND_CONFIDENCE = 0.9
WORD_CONFIDENCE = 0.85

_DIGIT_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(hours?|hrs?|h|minutes?|mins?|m)?\b")
_AND_A_HALF_PATTERN = re.compile(
    r"\b(?:([a-z]+)\s+)?([a-z]+|\d+(?:\.\d+)?)\s+and\s+(?:a\s+)?half\b(?:\s*(?:hours?|hrs?)\b)?"
)
_HOUR_AND_A_HALF_PATTERN = re.compile(r"\b(?:an?\s+)?hour\s+and\s+(?:a\s+)?half\b")
_FRACTION_PATTERN = re.compile(r"\b(and\s+)?(?:an?\s+)?(half|quarter|third)(?:\s+(?:of\s+)?an?)?\b")
_HOUR_UNIT = re.compile(r"^(?:hours?|hrs?|h)$")
_MINUTE_UNIT = re.compile(r"^(?:minutes?|mins?|m)$")
_LEFTOVER_UNITS = re.compile(r"\b(?:hours?|hrs?|minutes?|mins?)\b")
_TOKEN = re.compile(r"\S+")
_THOUSANDS_SEPARATOR = re.compile(r"(?<=\d),(?=\d{3}\b)")
_TENS = (20, 30, 40, 50)


@dataclass(frozen=True)
class DurationParse:
    """
    Result of extracting a duration from a transcript.

    Attributes:
        hours: Total duration in hours (0 when nothing was recognised)
        confidence: Confidence of the strongest pattern that contributed
        remaining_text: Normalized transcript with time expressions removed
    """
    hours: float
    confidence: float
    remaining_text: str

    @property
    def found(self) -> bool:
        return self.hours > 0


class _WorkingText:
    """Normalized transcript whose consumed spans are blanked in place.

    Blanking keeps character offsets stable so successive passes can keep
    using match positions, and no token is ever counted twice.
    """

    def __init__(self, text: str) -> None:
        self.text = text

    def consume(self, start: int, end: int) -> None:
        self.text = self.text[:start] + " " * (end - start) + self.text[end:]

    def tokens(self) -> List[Tuple[str, int, int]]:
        return [(m.group(), m.start(), m.end()) for m in _TOKEN.finditer(self.text)]

    def following_token(self, end: int) -> Optional[Tuple[str, int, int]]:
        match = _TOKEN.search(self.text, end)
        return (match.group(), match.start(), match.end()) if match else None


def _is_unit(token: str) -> bool:
    return bool(_HOUR_UNIT.match(token) or _MINUTE_UNIT.match(token))


def _to_hours(value: float, unit: str) -> float:
    return value / 60.0 if _MINUTE_UNIT.match(unit or "") else value


def _spoken_value(word: str, vocabulary: Vocabulary) -> Optional[float]:
    if word in vocabulary.misheard_number_words:
        return None
    if word in vocabulary.number_words:
        return float(vocabulary.number_words[word])
    try:
        return float(word)
    except ValueError:
        return None


def parse_duration(transcript: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> DurationParse:
    """
    Extract a duration in hours from a spoken transcript.

    Patterns, each one blanking the text it consumed:
        1. "N and a half [hours]" -> N + 0.5 (confidence 0.9)
        2. Digits with optional unit, "4 hours", "30 min", "1.5" (0.95)
        3. Number words, "four hours", "twenty five minutes" (0.85)
        4. "an hour and a half" when nothing else was found -> 1.5 (0.85)
        5. Fractions, "half an hour", "a quarter" (0.85)

    Amounts with an explicit unit add up ("2 hours 30 minutes" -> 2.5).
    An amount without a unit only counts while no hours have been found,
    so "4 hours at 12 Oak street" stays at 4.

    Args:
        transcript: Raw transcript
        vocabulary: Number and fraction tables

    Returns:
        DurationParse with hours, confidence and the leftover text
    """
    working = _WorkingText(normalize_numeric(_THOUSANDS_SEPARATOR.sub("", transcript or "")))
    hours = 0.0
    confidence = 0.0

    # 1. "two and a half hours"
    for match in _AND_A_HALF_PATTERN.finditer(working.text):
        tens_word, base_word = match.group(1), match.group(2)
        base = _spoken_value(base_word, vocabulary)
        if base is None:
            continue
        start = match.start(2)
        tens = _spoken_value(tens_word, vocabulary) if tens_word else None
        if tens in _TENS and 0 < base < 10:
            base += tens
            start = match.start(1)
        hours += base + 0.5
        confidence = max(confidence, COMPOUND_CONFIDENCE)
        working.consume(start, match.end())

    # 2. Digits with optional unit
    for match in _DIGIT_PATTERN.finditer(working.text):
        unit = match.group(2)
        if not unit and hours > 0:
            continue
        hours += _to_hours(float(match.group(1)), unit)
        confidence = max(confidence, DIGIT_CONFIDENCE)
        working.consume(match.start(), match.end())

    # 3. Number words
    tokens = working.tokens()
    i = 0
    while i < len(tokens):
        word, start, end = tokens[i]
        if word not in vocabulary.number_words:
            i += 1
            continue

        value = float(vocabulary.number_words[word])
        j = i + 1
        if value in _TENS and j < len(tokens):
            unit_value = _spoken_value(tokens[j][0], vocabulary)
            if unit_value is not None and 0 < unit_value < 10:
                value += unit_value
                end = tokens[j][2]
                j += 1

        following = tokens[j][0] if j < len(tokens) else ""
        has_unit = _is_unit(following)
        if word in vocabulary.misheard_number_words and not has_unit:
            i += 1
            continue
        if not has_unit and hours > 0:
            i = j
            continue

        hours += _to_hours(value, following)
        confidence = max(confidence, WORD_CONFIDENCE)
        if has_unit:
            end = tokens[j][2]
            j += 1
        working.consume(start, end)
        i = j

    # 4. "an hour and a half"
    if hours == 0:
        match = _HOUR_AND_A_HALF_PATTERN.search(working.text)
        if match:
            hours = 1.5
            confidence = max(confidence, WORD_CONFIDENCE)
            working.consume(match.start(), match.end())

    # 5. Fractions
    for match in _FRACTION_PATTERN.finditer(working.text):
        following = working.following_token(match.end())
        followed_by_unit = following is not None and _is_unit(following[0])
        if hours > 0 and not (match.group(1) or followed_by_unit):
            continue
        hours += vocabulary.fraction_words[match.group(2)]
        confidence = max(confidence, WORD_CONFIDENCE)
        end = following[2] if followed_by_unit else match.end()
        working.consume(match.start(), end)

    remaining = collapse_whitespace(_LEFTOVER_UNITS.sub(" ", working.text))
    logger.debug(f"Duration parse: hours={hours:.3f} confidence={confidence:.2f} remaining='{remaining}'")
    return DurationParse(hours=hours, confidence=confidence, remaining_text=remaining)
