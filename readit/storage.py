"""
Comment file format.

A comment file is Markdown with YAML-style front matter followed by one
block per comment, blocks separated by bare ``---`` lines::

    ---
    source: /abs/path/to/doc.md
    hash: 0123456789abcdef
    version: 1
    ---

    <!-- c:1a2b3c4d|L42-45|2025-01-01T12:00:00+00:00 -->
    <!-- anchor:first 200 chars of a long selection -->
    > quoted selection line 1
    > quoted selection line 2

    Comment body.

    ---

Offsets and anchor confidence are never written; they are recomputed by the
resolver every time a file is loaded.
"""

from __future__ import annotations

import re

from readit.errors import UnsupportedVersionError
from readit.logging_config import logger
from readit.models import Comment, CommentFile

FORMAT_VERSION = 1

_FRONT_MATTER = re.compile(r"\A---[ \t]*\n(.*?)\n---[ \t]*(?:\n|\Z)", re.DOTALL)
_FRONT_MATTER_FIELD = re.compile(r"^(\w+):[ \t]*(.*?)[ \t]*$")
_SEPARATOR = re.compile(r"^---[ \t]*$", re.MULTILINE)
_METADATA = re.compile(r"^<!--\s*c:([^|\s]+)\|([^|]*)\|(.+?)\s*-->$")
_ANCHOR_CANONICAL = re.compile(r"^<!-- anchor:(.*) -->$")
_ANCHOR_LOOSE = re.compile(r"^<!--\s*anchor:(.*?)\s*-->$")


def parse_comment_file(content: str | bytes) -> CommentFile:
    """
    Parse a comment file.

    Malformed comment blocks are dropped so the well-formed ones stay
    available.

    Args:
        content: File content, as text or UTF-8 bytes

    Returns:
        CommentFile with comments in file order

    Raises:
        UnsupportedVersionError: If the file needs a newer format version
    """
    if isinstance(content, bytes):
        content = content.decode("utf-8")
    content = content.removeprefix("\ufeff").replace("\r\n", "\n")

    if not content.strip():
        return CommentFile()

    fields: dict[str, str] = {}
    body = content
    front_matter = _FRONT_MATTER.match(content)
    if front_matter:
        fields = _parse_front_matter(front_matter.group(1))
        body = content[front_matter.end() :]

    version = _parse_version(fields.get("version"))
    if version > FORMAT_VERSION:
        raise UnsupportedVersionError(required=version, supported=FORMAT_VERSION)

    comments: list[Comment] = []
    seen: set[str] = set()
    for block in _SEPARATOR.split(body):
        if not block.strip():
            continue
        comment = parse_comment_block(block)
        if comment is None:
            logger.debug(f"Dropping malformed comment block: {block.strip()[:60]!r}")
            continue
        if comment.id in seen:
            logger.debug(f"Dropping duplicate comment id {comment.id}")
            continue
        seen.add(comment.id)
        comments.append(comment)

    return CommentFile(
        source=fields.get("source", ""),
        hash=fields.get("hash", ""),
        version=version,
        comments=comments,
    )


def _parse_front_matter(text: str) -> dict[str, str]:
    """Read ``key: value`` lines in any order."""
    fields: dict[str, str] = {}
    for line in text.split("\n"):
        match = _FRONT_MATTER_FIELD.match(line)
        if match:
            fields[match.group(1)] = match.group(2)
    return fields


def _parse_version(raw: str | None) -> int:
    """Declared format version; missing or unreadable values mean the current one."""
    if raw is None or raw == "":
        return FORMAT_VERSION
    if not (raw.isascii() and raw.isdigit()) or int(raw) < 1:
        logger.debug(f"Ignoring invalid comment file version: {raw!r}")
        return FORMAT_VERSION
    return int(raw)


def parse_comment_block(block: str) -> Comment | None:
    """
    Decode one comment block.

    Returns None when the metadata line or the quoted selection is missing.
    """
    lines = block.strip("\n").split("\n")
    index = _skip_blank(lines, 0)
    if index >= len(lines):
        return None

    metadata = _METADATA.match(lines[index].strip())
    if not metadata:
        return None
    comment_id, line_hint, created_at = metadata.groups()
    index += 1

    anchor_prefix = None
    index = _skip_blank(lines, index)
    if index < len(lines):
        anchor = _ANCHOR_CANONICAL.match(lines[index]) or _ANCHOR_LOOSE.match(
            lines[index].strip()
        )
        if anchor:
            anchor_prefix = anchor.group(1)
            index = _skip_blank(lines, index + 1)

    quoted: list[str] = []
    while index < len(lines) and lines[index].startswith(">"):
        quoted.append(_unquote(lines[index]))
        index += 1
    if not quoted:
        return None

    return Comment(
        id=comment_id,
        selected_text="\n".join(quoted),
        comment="\n".join(lines[index:]).strip(),
        created_at=created_at.strip(),
        line_hint=line_hint.strip(),
        anchor_prefix=anchor_prefix,
    )


def _skip_blank(lines: list[str], index: int) -> int:
    while index < len(lines) and not lines[index].strip():
        index += 1
    return index


def _unquote(line: str) -> str:
    if line.startswith("> "):
        return line[2:]
    return line[1:]


def serialize_comment_file(comment_file: CommentFile) -> str:
    """Render a CommentFile in the canonical on-disk layout."""
    lines = [
        "---",
        f"source: {comment_file.source}",
        f"hash: {comment_file.hash}",
        f"version: {comment_file.version}",
        "---",
        "",
    ]

    for comment in comment_file.comments:
        lines.append(serialize_comment(comment))
        lines.extend(["", "---", ""])

    return "\n".join(lines)


def serialize_comment_file_bytes(comment_file: CommentFile) -> bytes:
    return serialize_comment_file(comment_file).encode("utf-8")


def serialize_comment(comment: Comment) -> str:
    """Render a single comment block (without the trailing separator)."""
    lines = [f"<!-- c:{comment.id}|{comment.line_hint or 'L1'}|{comment.created_at} -->"]

    if comment.anchor_prefix:
        # the metadata comment must stay on one line
        prefix = re.sub(r"[\r\n]", " ", comment.anchor_prefix)
        lines.append(f"<!-- anchor:{prefix} -->")

    lines.extend(f"> {line}" for line in comment.selected_text.split("\n"))

    if comment.comment:
        lines.append("")
        lines.append(comment.comment)

    return "\n".join(lines)
