"""
Text comparison primitives used by the anchor resolver.

Bounded Levenshtein distance and whitespace normalization with a position
map back into the original text.
"""

import math
import re
from typing import NamedTuple

# Returned by a bounded distance computation that ran over budget
EXCEEDS = math.inf

_WHITESPACE_RUN = re.compile(r"\s+")


def levenshtein_distance(a: str, b: str, max_distance: int | None = None) -> float:
    """
    Edit distance between two strings (insert, delete, substitute; unit cost).

    Keeps two rolling rows sized to the shorter string. Characters are code
    points, so a multi-byte character counts as a single edit.

    Args:
        a: First string
        b: Second string
        max_distance: Optional budget. When the distance is certain to exceed
            it, ``EXCEEDS`` is returned as soon as that is known.

    Returns:
        The distance as an int, or ``EXCEEDS``
    """
    if len(a) > len(b):
        a, b = b, a

    m = len(a)
    n = len(b)

    if m == 0:
        return n if max_distance is None or n <= max_distance else EXCEEDS

    if max_distance is not None and n - m > max_distance:
        return EXCEEDS

    prev_row = list(range(m + 1))
    curr_row = [0] * (m + 1)

    for j in range(1, n + 1):
        curr_row[0] = j
        row_min = j
        bj = b[j - 1]

        for i in range(1, m + 1):
            cost = 0 if a[i - 1] == bj else 1
            value = min(
                prev_row[i] + 1,  # deletion
                curr_row[i - 1] + 1,  # insertion
                prev_row[i - 1] + cost,  # substitution
            )
            curr_row[i] = value
            if value < row_min:
                row_min = value

        # No cheaper path remains once the whole row is over budget
        if max_distance is not None and row_min > max_distance:
            return EXCEEDS

        prev_row, curr_row = curr_row, prev_row

    result = prev_row[m]
    if max_distance is not None and result > max_distance:
        return EXCEEDS
    return result


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space and strip the ends."""
    return _WHITESPACE_RUN.sub(" ", text).strip()


class PositionMap(NamedTuple):
    """Whitespace-normalized text plus, per character, its original index."""

    normalized: str
    to_original: list[int]


def build_position_map(text: str) -> PositionMap:
    """
    Normalize whitespace and record where each output character came from.

    Leading whitespace is dropped, each interior run becomes one space mapped
    to the first character of the run, and a trailing run is dropped.
    """
    chars: list[str] = []
    to_original: list[int] = []
    in_whitespace = False

    for i, char in enumerate(text):
        if char.isspace():
            if not in_whitespace and chars:
                chars.append(" ")
                to_original.append(i)
            in_whitespace = True
        else:
            chars.append(char)
            to_original.append(i)
            in_whitespace = False

    if chars and chars[-1] == " ":
        chars.pop()
        to_original.pop()

    return PositionMap("".join(chars), to_original)


def map_span_to_original(
    text: str,
    position_map: PositionMap,
    start: int,
    length: int,
    base: int = 0,
) -> tuple[int, int]:
    """
    Translate a match in normalized space back into ``text``.

    Args:
        text: The full original text
        position_map: Map built from ``text[base:]`` (or a window of it)
        start: Match start in the normalized string
        length: Match length in the normalized string (at least 1)
        base: Offset of the mapped window inside ``text``

    Returns:
        (start, end) in ``text``. The end is extended through any whitespace
        directly following the match, so the span never stops mid-run.
    """
    to_original = position_map.to_original
    original_start = base + to_original[start]
    original_end = base + to_original[start + length - 1] + 1
    while original_end < len(text) and text[original_end].isspace():
        original_end += 1
    return original_start, original_end
