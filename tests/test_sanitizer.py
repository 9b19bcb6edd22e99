"""Tests for the timestamp sanitizer.

WHY: Every later stage assumes monotonic, non-overlapping, non-empty
words. These tests pin down each repair the sanitizer performs.
"""

import math

import pytest

from subtitle_studio.core.ir import WordToken
from subtitle_studio.core.sanitizer import clean_text, clean_time, sanitize_tokens
from subtitle_studio.core.settings import MIN_WORD_DURATION_S


class TestCleanTime:

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), -1.5, "abc", None, True])
    def test_malformed_values_become_zero(self, value):
        assert clean_time(value) == 0.0

    def test_valid_values_pass_through(self):
        assert clean_time(1.25) == 1.25
        assert clean_time(3) == 3.0
        assert clean_time("2.5") == 2.5


class TestCleanText:

    def test_newlines_removed_and_trimmed(self):
        assert clean_text("  hel\nlo\r\n ") == "hello"

    def test_none_is_empty(self):
        assert clean_text(None) == ""


class TestSanitizeTokens:

    def test_clean_input_unchanged(self):
        tokens = [WordToken("a", 0.0, 0.3), WordToken("b", 0.4, 0.8)]
        assert sanitize_tokens(tokens) == tokens

    def test_drops_empty_and_whitespace_tokens(self):
        tokens = [
            WordToken("one", 0.0, 0.2),
            WordToken("   ", 0.2, 0.4),
            WordToken("\n", 0.4, 0.5),
            WordToken("two", 0.5, 0.8),
        ]
        result = sanitize_tokens(tokens)
        assert [t.text for t in result] == ["one", "two"]

    def test_dropped_token_does_not_affect_next_timing(self):
        tokens = [
            WordToken("one", 0.0, 0.2),
            WordToken("", 0.0, 5.0),
            WordToken("two", 0.3, 0.6),
        ]
        result = sanitize_tokens(tokens)
        assert result[1].start_s == 0.3

    def test_overlap_shifts_start_forward(self):
        tokens = [WordToken("a", 0.0, 1.0), WordToken("b", 0.5, 1.5)]
        result = sanitize_tokens(tokens)
        assert result[1].start_s == 1.0
        assert result[1].end_s == 1.5

    def test_overlap_fully_inside_previous_word(self):
        tokens = [WordToken("a", 0.0, 2.0), WordToken("b", 0.5, 1.0)]
        result = sanitize_tokens(tokens)
        assert result[1].start_s == 2.0
        assert result[1].end_s == pytest.approx(2.0 + MIN_WORD_DURATION_S)

    def test_inverted_times_get_minimum_duration(self):
        result = sanitize_tokens([WordToken("x", 2.0, 1.0)])
        assert result[0].start_s == 2.0
        assert result[0].end_s == pytest.approx(2.0 + MIN_WORD_DURATION_S)

    def test_nan_and_negative_times_clamped(self):
        result = sanitize_tokens([WordToken("x", float("nan"), -3.0)])
        assert result[0].start_s == 0.0
        assert result[0].end_s == pytest.approx(MIN_WORD_DURATION_S)

    def test_zero_duration_extended(self):
        result = sanitize_tokens([WordToken("x", 1.0, 1.0)], min_word_duration=0.1)
        assert result[0].end_s == pytest.approx(1.1)

    def test_never_reorders(self):
        tokens = [WordToken("late", 5.0, 6.0), WordToken("early", 1.0, 2.0)]
        result = sanitize_tokens(tokens)
        assert [t.text for t in result] == ["late", "early"]
        assert result[1].start_s >= result[0].end_s

    def test_output_is_monotonic_and_idempotent(self, interview_tokens):
        messy = interview_tokens + [
            WordToken("again", 1.0, 0.5),
            WordToken("", 0.0, 0.0),
            WordToken("end", float("inf"), 7.0),
        ]
        once = sanitize_tokens(messy)
        for prev, cur in zip(once, once[1:]):
            assert cur.start_s >= prev.end_s
        for tok in once:
            assert tok.text
            assert math.isfinite(tok.start_s) and tok.start_s >= 0
            assert tok.end_s - tok.start_s >= MIN_WORD_DURATION_S - 1e-9
        assert sanitize_tokens(once) == once

    def test_input_not_mutated(self):
        tokens = [WordToken("a", 0.0, 1.0), WordToken("b", 0.5, 1.5)]
        copy = list(tokens)
        sanitize_tokens(tokens)
        assert tokens == copy

    def test_empty_input(self):
        assert sanitize_tokens([]) == []
