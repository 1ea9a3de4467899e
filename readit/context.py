"""
Surrounding-lines context for a commented span.

Renders the lines around a selection with ``>>>`` / ``<<<`` markers at the
selection boundaries, ready to paste into an LLM prompt together with the
comment.
"""

from __future__ import annotations

import re
from typing import NamedTuple

DEFAULT_CONTEXT_LINES = 2
# selections spanning more lines are shown head and tail only
MAX_SELECTION_LINES = 10
MAX_LINE_LENGTH = 200

_SCRIPT_OR_STYLE = re.compile(r"<(script|style)[^>]*>.*?</\1>", re.IGNORECASE | re.DOTALL)
_TAG = re.compile(r"<[^>]+>")
_HTML_HINT = re.compile(r"<[a-z][\s\S]*>", re.IGNORECASE)
_NAMED_ENTITIES = (
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&amp;", "&"),
    ("&quot;", '"'),
    ("&#39;", "'"),
)
_DECIMAL_ENTITY = re.compile(r"&#(\d+);")
_HEX_ENTITY = re.compile(r"&#x([0-9a-f]+);", re.IGNORECASE)


class ContextResult(NamedTuple):
    """Marked-up lines around a selection and its 1-indexed line range."""

    lines: list[str]
    start_line: int
    end_line: int


def strip_html_tags(html: str) -> str:
    """
    Plain text of an HTML document, as a browser's text nodes would give it.

    Script and style bodies are dropped, tags removed, and common named plus
    all numeric character references decoded.
    """
    text = _SCRIPT_OR_STYLE.sub("", html)
    text = _TAG.sub("", text)
    for entity, char in _NAMED_ENTITIES:
        text = text.replace(entity, char)
    text = _DECIMAL_ENTITY.sub(lambda m: chr(int(m.group(1))), text)
    return _HEX_ENTITY.sub(lambda m: chr(int(m.group(1), 16)), text)


def is_html(content: str) -> bool:
    return _HTML_HINT.search(content) is not None


def _truncate_line(line: str, max_length: int = MAX_LINE_LENGTH) -> str:
    if len(line) <= max_length:
        return line
    return line[: max_length - 3] + "..."


def extract_context(
    content: str,
    start_offset: int,
    end_offset: int,
    context_lines: int = DEFAULT_CONTEXT_LINES,
    strip_html: bool | None = None,
) -> ContextResult:
    """
    Lines around ``content[start_offset:end_offset]`` with selection markers.

    Args:
        content: Document text
        start_offset: Selection start
        end_offset: Selection end (exclusive)
        context_lines: Lines to include before and after the selection
        strip_html: Strip tags before locating the offsets. None detects HTML
            from the content; pass False when the offsets index the raw file.

    Returns:
        ContextResult; selections over ``MAX_SELECTION_LINES`` lines keep
        their first and last lines around a ``...`` line
    """
    if strip_html is None:
        strip_html = is_html(content)
    if strip_html:
        content = strip_html_tags(content)
    lines = content.replace("\r\n", "\n").split("\n")

    start_index = end_index = -1
    start_char = end_char = 0
    line_start = 0
    for i, line in enumerate(lines):
        line_end = line_start + len(line)
        if start_index == -1 and line_end >= start_offset:
            start_index = i
            start_char = start_offset - line_start
        if line_end >= end_offset:
            end_index = i
            end_char = end_offset - line_start
            break
        line_start = line_end + 1

    if start_index == -1:
        start_index = 0
    if end_index == -1:
        end_index = len(lines) - 1

    first = max(0, start_index - context_lines)
    last = min(len(lines) - 1, end_index + context_lines)
    truncate_middle = end_index - start_index + 1 > MAX_SELECTION_LINES

    output: list[str] = []
    for i in range(first, last + 1):
        line = lines[i]

        if truncate_middle and start_index + 2 < i < end_index - 2:
            if i == start_index + 3:
                output.append("...")
            continue

        if i == start_index and i == end_index:
            line = f"{line[:start_char]}>>> {line[start_char:end_char]} <<<{line[end_char:]}"
        elif i == start_index:
            line = f"{line[:start_char]}>>> {line[start_char:]}"
        elif i == end_index:
            line = f"{line[:end_char]} <<<{line[end_char:]}"

        output.append(_truncate_line(line))

    return ContextResult(output, start_index + 1, end_index + 1)


def format_for_llm(context: ContextResult, file_name: str, comment: str | None = None) -> str:
    """Context block with a file header, line range and optional comment."""
    parts = [
        f"# From: {file_name}",
        "",
        f"Lines {context.start_line}-{context.end_line}:",
        "\n".join(["---", *context.lines, "---"]),
    ]
    if comment:
        parts.extend(["", f"Comment: {comment}"])
    return "\n".join(parts)
