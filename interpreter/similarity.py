"""String similarity used by every fuzzy matcher.

All matchers score candidates through these two functions so that
containment, edit distance and word overlap are weighed identically
everywhere.
"""
from __future__ import annotations

from rapidfuzz.distance import Levenshtein

from .text_normalizer import normalize
from .text_utils import tokenize

CONTAINMENT_SCORE = 0.9


def similarity(a: str, b: str) -> float:
    """
    Similarity of two strings in [0, 1].

    Both inputs are normalized first. Equal strings score 1.0, an empty
    string scores 0.0 and containment of one string in the other scores 0.9.
    Otherwise the score is ``1 - levenshtein / max(len)``.

    The result is symmetric and reflexive.
    """
    s1 = normalize(a)
    s2 = normalize(b)

    if s1 == s2:
        return 1.0
    if not s1 or not s2:
        return 0.0

    if s1 in s2 or s2 in s1:
        return CONTAINMENT_SCORE

    distance = Levenshtein.distance(s1, s2)
    return 1.0 - distance / max(len(s1), len(s2))


def _significant_words(text: str):
    return tokenize(text, min_length=3)


def word_overlap(a: str, b: str) -> float:
    """Share of words (longer than two characters) of ``a`` found in ``b``.

    The count is divided by the larger token count so that a one-word query
    does not fully match a five-word name.
    """
    words_a = _significant_words(a)
    words_b = _significant_words(b)
    if not words_a or not words_b:
        return 0.0

    words_b_set = set(words_b)
    overlap = sum(1 for word in words_a if word in words_b_set)
    return overlap / max(len(words_a), len(words_b))


def best_word_similarity(words_a, words_b, min_length: int) -> float:
    """Highest pairwise similarity between two token lists.

    Tokens shorter than ``min_length`` are ignored on both sides.
    """
    best = 0.0
    for word_a in words_a:
        if len(word_a) < min_length:
            continue
        for word_b in words_b:
            if len(word_b) < min_length:
                continue
            score = similarity(word_a, word_b)
            if score > best:
                best = score
    return best
