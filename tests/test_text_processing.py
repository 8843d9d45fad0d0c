"""Unit tests for text normalization, text utilities and similarity."""
import pytest

from interpreter.similarity import best_word_similarity, similarity, word_overlap
from interpreter.text_normalizer import collapse_whitespace, normalize, normalize_numeric
from interpreter.text_utils import capitalize, contains_phrase, first_phrase, split_sentences, tokenize


class TestNormalize:
    def test_lowercases_and_strips_punctuation(self):
        assert normalize("Log 4 Hours, framing!") == "log 4 hours framing"

    def test_collapses_whitespace(self):
        assert normalize("  Smith   House \t job ") == "smith house job"

    def test_empty_input(self):
        assert normalize("") == ""
        assert normalize(None) == ""

    @pytest.mark.parametrize("text", [
        "Mark drywall installation complete.",
        "It's 75°, sunny -- 5 crew!",
        "   ",
        "Electrical rough-in",
    ])
    def test_idempotent(self, text):
        once = normalize(text)
        assert normalize(once) == once

    def test_normalize_numeric_keeps_decimal_point(self):
        assert normalize_numeric("Enter 1.5 hours, please.") == "enter 1.5 hours please"

    def test_normalize_numeric_drops_sentence_dots(self):
        assert normalize_numeric("Worked 4. Then left.") == "worked 4 then left"

    def test_collapse_whitespace(self):
        assert collapse_whitespace("  a   b ") == "a b"


class TestTextUtils:
    def test_tokenize_with_min_length(self):
        assert tokenize("Log 4 hours at the site", min_length=3) == ["log", "hours", "the", "site"]

    def test_split_sentences(self):
        text = "Today was sunny. We had 5 crew!  Finished framing?"
        assert split_sentences(text) == ["Today was sunny", "We had 5 crew", "Finished framing"]

    def test_contains_phrase_is_whole_word(self):
        assert contains_phrase("hvac work", "hvac")
        assert not contains_phrase("place the studs", "ac")
        assert contains_phrase("put on hold today", "on hold")

    def test_contains_phrase_empty(self):
        assert not contains_phrase("anything", "")

    def test_first_phrase(self):
        assert first_phrase("crew was stuck waiting on", ["pending", "stuck"]) == "stuck"
        assert first_phrase("nothing here", ["pending"]) == ""

    def test_capitalize(self):
        assert capitalize("framing") == "Framing"
        assert capitalize("") == ""


class TestSimilarity:
    def test_equal_strings_score_one(self):
        assert similarity("Smith House", "smith house") == 1.0

    def test_empty_scores_zero(self):
        assert similarity("", "x") == 0.0
        assert similarity("x", "") == 0.0

    def test_containment_scores_point_nine(self):
        assert similarity("smith", "Smith House") == 0.9

    def test_edit_distance(self):
        # kitten -> sitting needs three edits over seven characters
        assert similarity("kitten", "sitting") == pytest.approx(1 - 3 / 7)

    @pytest.mark.parametrize("a,b", [
        ("drywall", "drywal"),
        ("framing", "painting"),
        ("johnson renovation", "jonson renovations"),
    ])
    def test_symmetric_and_bounded(self, a, b):
        score = similarity(a, b)
        assert score == similarity(b, a)
        assert 0.0 <= score <= 1.0

    def test_reflexive(self):
        assert similarity("Electrical Rough-In", "Electrical Rough-In") == 1.0


class TestWordOverlap:
    def test_partial_overlap_divides_by_larger_set(self):
        assert word_overlap("drywall installation", "drywall installation phase") == pytest.approx(2 / 3)

    def test_short_words_ignored(self):
        assert word_overlap("a to", "a to") == 0.0

    def test_no_overlap(self):
        assert word_overlap("framing", "plumbing work") == 0.0


class TestBestWordSimilarity:
    def test_ignores_short_tokens(self):
        assert best_word_similarity(["ac"], ["ac"], min_length=3) == 0.0

    def test_best_pair(self):
        assert best_word_similarity(["smith", "house"], ["at", "smyth"], min_length=3) == pytest.approx(0.8)
