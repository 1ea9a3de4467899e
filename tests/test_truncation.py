"""Tests for selection truncation."""

import pytest

from readit.truncation import (
    ANCHOR_PREFIX_LENGTH,
    MAX_SELECTION_LENGTH,
    TRUNCATION_MARKER,
    anchor_prefix_for,
    truncate_selection,
)


def _long_text(length: int) -> str:
    return "".join(chr(ord("a") + i % 26) for i in range(length))


class TestTruncateSelection:
    """Tests for truncate_selection."""

    @pytest.mark.parametrize("length", [0, 1, 500, MAX_SELECTION_LENGTH])
    def test_short_text_unchanged(self, length: int) -> None:
        text = _long_text(length)
        assert truncate_selection(text) == text

    @pytest.mark.parametrize("length", [MAX_SELECTION_LENGTH + 1, 5000])
    def test_long_text_keeps_head_and_tail(self, length: int) -> None:
        text = _long_text(length)

        result = truncate_selection(text)

        assert TRUNCATION_MARKER in result
        assert result.startswith(text[:497])
        assert result.endswith(text[-497:])
        assert len(result) == 497 * 2 + len(TRUNCATION_MARKER)

    def test_marker_sits_between_halves(self) -> None:
        text = "x" * 600 + "y" * 600

        head, tail = truncate_selection(text).split(TRUNCATION_MARKER)

        assert head == "x" * 497
        assert tail == "y" * 497


class TestAnchorPrefixFor:
    """Tests for anchor_prefix_for."""

    def test_none_when_not_truncated(self) -> None:
        assert anchor_prefix_for("short selection") is None
        assert anchor_prefix_for(_long_text(MAX_SELECTION_LENGTH)) is None

    def test_prefix_of_untruncated_text(self) -> None:
        text = _long_text(MAX_SELECTION_LENGTH + 1)

        prefix = anchor_prefix_for(text)

        assert prefix == text[:ANCHOR_PREFIX_LENGTH]
        assert len(prefix) == 200
