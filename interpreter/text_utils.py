"""Text utility functions for the voice command interpreter."""
from __future__ import annotations

import re
from typing import Iterable, List

from .text_normalizer import normalize

_SENTENCE_SPLIT = re.compile(r"[.!?]+")


def tokenize(text: str, min_length: int = 1) -> List[str]:
    """
    Split text into normalized word tokens.

    Args:
        text: Input text to tokenize
        min_length: Drop tokens shorter than this

    Returns:
        List of lowercase tokens
    """
    return [token for token in normalize(text).split() if len(token) >= min_length]


def split_sentences(text: str) -> List[str]:
    """Split raw text on sentence punctuation, dropping empty pieces."""
    return [s.strip() for s in _SENTENCE_SPLIT.split(text or "") if s.strip()]


def contains_phrase(normalized_text: str, phrase: str) -> bool:
    """Whole-word containment of ``phrase`` inside already-normalized text.

    "place" does not contain the phrase "ac", "hvac work" does.
    """
    if not phrase:
        return False
    return re.search(rf"\b{re.escape(phrase)}\b", normalized_text) is not None


def first_phrase(normalized_text: str, phrases: Iterable[str]) -> str:
    """Return the first phrase of ``phrases`` found in the text, or ''."""
    for phrase in phrases:
        if contains_phrase(normalized_text, phrase):
            return phrase
    return ""


def capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]
