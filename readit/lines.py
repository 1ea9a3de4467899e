"""Conversion between 1-indexed line numbers, offsets and line hints."""

from typing import NamedTuple

from readit.config import LINE_HINT_PATTERN


class LineRange(NamedTuple):
    """Inclusive 1-indexed line range parsed from a line hint."""

    start: int
    end: int


def get_line_offset(document: str, line_number: int) -> int:
    """
    Character offset of the first character of a 1-indexed line.

    Line numbers of 1 or less map to 0; line numbers past the last line map
    to ``len(document)``.
    """
    if line_number <= 1:
        return 0

    offset = -1
    for _ in range(line_number - 1):
        offset = document.find("\n", offset + 1)
        if offset == -1:
            return len(document)
    return offset + 1


def get_line_number(document: str, offset: int) -> int:
    """1-indexed line containing ``offset`` (clamped into the document)."""
    if offset <= 0 or not document:
        return 1
    offset = min(offset, len(document))
    return document.count("\n", 0, offset) + 1


def parse_line_hint(line_hint: str | None) -> LineRange:
    """
    Parse "L42" or "L42-45".

    Anything else, including an empty hint, yields ``LineRange(1, 1)``: a
    hint only narrows the search, it never fails it.
    """
    match = LINE_HINT_PATTERN.match(line_hint or "")
    if not match:
        return LineRange(1, 1)

    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) else start
    return LineRange(start, end)


def format_line_hint(document: str, start_offset: int, end_offset: int) -> str:
    """Line hint for a span: "L<n>" on a single line, else "L<n>-<m>"."""
    start_line = get_line_number(document, start_offset)
    end_line = get_line_number(document, end_offset)
    if start_line == end_line:
        return f"L{start_line}"
    return f"L{start_line}-{end_line}"


def hint_offset(document: str, line_hint: str | None) -> int:
    """Offset of the first line named by a hint."""
    return get_line_offset(document, parse_line_hint(line_hint).start)
