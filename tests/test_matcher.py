"""Tests for Levenshtein distance and whitespace normalization."""

import pytest

from readit.matcher import (
    EXCEEDS,
    build_position_map,
    levenshtein_distance,
    map_span_to_original,
    normalize_whitespace,
)


class TestLevenshteinDistance:
    """Tests for levenshtein_distance."""

    @pytest.mark.parametrize("text", ["", "a", "hello", "héllo wörld", "日本語"])
    def test_identity_is_zero(self, text: str) -> None:
        assert levenshtein_distance(text, text) == 0

    @pytest.mark.parametrize(
        ("a", "b"),
        [("kitten", "sitting"), ("flaw", "lawn"), ("", "abc"), ("gumbo", "gambol")],
    )
    def test_symmetric(self, a: str, b: str) -> None:
        assert levenshtein_distance(a, b) == levenshtein_distance(b, a)

    def test_single_substitution(self) -> None:
        assert levenshtein_distance("hello", "hallo") == 1

    def test_classic_examples(self) -> None:
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("flaw", "lawn") == 2

    def test_empty_string_is_other_length(self) -> None:
        assert levenshtein_distance("hello", "") == 5
        assert levenshtein_distance("", "hello") == 5
        assert levenshtein_distance("", "") == 0

    def test_counts_code_points_not_bytes(self) -> None:
        assert levenshtein_distance("café", "cafe") == 1
        assert levenshtein_distance("日本語", "日本") == 1

    def test_exceeds_when_over_budget(self) -> None:
        assert levenshtein_distance("hello", "world", max_distance=1) == EXCEEDS

    def test_exceeds_on_length_difference(self) -> None:
        assert levenshtein_distance("a", "abcdef", max_distance=2) == EXCEEDS

    def test_within_budget_returns_exact_distance(self) -> None:
        assert levenshtein_distance("hello", "hallo", max_distance=1) == 1
        assert levenshtein_distance("kitten", "sitting", max_distance=3) == 3

    def test_exceeds_compares_greater_than_any_budget(self) -> None:
        result = levenshtein_distance("kitten", "sitting", max_distance=2)
        assert result > 2

    def test_zero_budget(self) -> None:
        assert levenshtein_distance("same", "same", max_distance=0) == 0
        assert levenshtein_distance("same", "sane", max_distance=0) == EXCEEDS


class TestNormalizeWhitespace:
    """Tests for normalize_whitespace."""

    def test_collapses_runs(self) -> None:
        assert normalize_whitespace("hello \t\n  world") == "hello world"

    def test_trims_ends(self) -> None:
        assert normalize_whitespace("\n  hello world \n") == "hello world"

    def test_no_whitespace_unchanged(self) -> None:
        assert normalize_whitespace("hello") == "hello"

    def test_only_whitespace(self) -> None:
        assert normalize_whitespace(" \n\t ") == ""


class TestBuildPositionMap:
    """Tests for build_position_map."""

    def test_maps_each_character(self) -> None:
        result = build_position_map("  a  b\n")

        assert result.normalized == "a b"
        assert result.to_original == [2, 3, 5]

    def test_matches_normalize_whitespace(self) -> None:
        text = "\tThe  quick\n\nbrown   fox \n"
        result = build_position_map(text)

        assert result.normalized == normalize_whitespace(text)
        assert len(result.to_original) == len(result.normalized)

    def test_non_space_characters_map_to_themselves(self) -> None:
        text = "one\n  two three"
        result = build_position_map(text)

        for i, char in enumerate(result.normalized):
            if char != " ":
                assert text[result.to_original[i]] == char

    def test_collapsed_space_maps_to_run_start(self) -> None:
        result = build_position_map("one\n  two")

        assert result.normalized == "one two"
        assert result.to_original[3] == 3

    def test_empty(self) -> None:
        assert build_position_map("") == ("", [])
        assert build_position_map("   ") == ("", [])


class TestMapSpanToOriginal:
    """Tests for map_span_to_original."""

    def test_maps_back_to_original_content(self) -> None:
        text = "hello\n  world"
        position_map = build_position_map(text)

        start, end = map_span_to_original(text, position_map, 0, len("hello world"))

        assert text[start:end] == "hello\n  world"

    def test_extends_through_trailing_whitespace(self) -> None:
        text = "alpha beta\n\n   gamma delta"
        position_map = build_position_map(text)
        index = position_map.normalized.find("alpha")

        start, end = map_span_to_original(text, position_map, index, len("alpha"))

        assert (start, end) == (0, 6)

    def test_applies_window_base(self) -> None:
        text = "xxxxx one\n two"
        position_map = build_position_map(text[5:])

        start, end = map_span_to_original(text, position_map, 0, len("one two"), base=5)

        assert text[start:end] == "one\n two"
