"""Transcript normalization shared by every interpreter component."""
from __future__ import annotations

import re

_NON_WORD = re.compile(r"[^\w\s]")
_NON_WORD_KEEP_DECIMALS = re.compile(r"(?!(?<=\d)\.(?=\d))[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize(text: str) -> str:
    """Lowercase, replace punctuation with spaces and collapse whitespace.

    ``normalize(normalize(s)) == normalize(s)`` for every string.
    """
    if not text:
        return ""
    lowered = _NON_WORD.sub(" ", text.lower())
    return _WHITESPACE.sub(" ", lowered).strip()


def normalize_numeric(text: str) -> str:
    """Like :func:`normalize` but keeps decimal points between digits.

    "Enter 1.5 hours!" -> "enter 1.5 hours"
    """
    if not text:
        return ""
    lowered = _NON_WORD_KEEP_DECIMALS.sub(" ", text.lower())
    return _WHITESPACE.sub(" ", lowered).strip()


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()
