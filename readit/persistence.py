"""
Comment files on disk.

Maps documents to their comment files, creates new comments and performs
atomic reads and writes. Concurrent writers are last-writer-wins.
"""

from __future__ import annotations

import hashlib
import os
import re
import tempfile
import uuid
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

from readit.anchors import refresh_line_hint, resolve_comments
from readit.config import COMMENT_FILE_SUFFIX, COMMENT_ID_LENGTH, HASH_LENGTH, get_comments_root
from readit.lines import format_line_hint
from readit.logging_config import logger
from readit.models import AnchorConfidence, Comment, CommentFile, ResolvedComment
from readit.storage import FORMAT_VERSION, parse_comment_file, serialize_comment_file
from readit.truncation import anchor_prefix_for, truncate_selection

_DRIVE = re.compile(r"^[A-Za-z]:[\\/]")


def compute_hash(content: str) -> str:
    """First 16 hex chars of the SHA-256 of ``content``."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()[:HASH_LENGTH]


def get_comment_path(source_path: str | Path, root: Path | None = None) -> Path:
    """
    Where comments for a document are stored.

    ``/home/me/notes/plan.md`` maps to
    ``<root>/home/me/notes/plan.comments.md``.
    """
    absolute = str(Path(source_path).resolve())
    relative = _DRIVE.sub("", absolute).lstrip("/\\")
    without_ext = Path(relative).with_suffix("")
    return (root or get_comments_root()) / f"{without_ext}{COMMENT_FILE_SUFFIX}"


def create_comment(
    selected_text: str,
    comment_text: str,
    start_offset: int,
    end_offset: int,
    document: str,
    now: datetime | None = None,
) -> ResolvedComment:
    """
    Build a new comment for a selection in ``document``.

    Long selections are truncated for storage; the untruncated head is kept
    as the anchor prefix.
    """
    created_at = (now or datetime.now(timezone.utc)).isoformat()
    return ResolvedComment(
        id=uuid.uuid4().hex[:COMMENT_ID_LENGTH],
        selected_text=truncate_selection(selected_text),
        comment=comment_text,
        created_at=created_at,
        line_hint=format_line_hint(document, start_offset, end_offset),
        anchor_prefix=anchor_prefix_for(selected_text),
        start_offset=start_offset,
        end_offset=end_offset,
        anchor_confidence=AnchorConfidence.EXACT,
    )


def load_comment_file(source_path: str | Path, root: Path | None = None) -> CommentFile | None:
    """Parse the comment file for a document, or None if it does not exist."""
    comment_path = get_comment_path(source_path, root)
    try:
        content = comment_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    return parse_comment_file(content)


def read_comments(
    source_path: str | Path,
    document: str,
    root: Path | None = None,
) -> list[ResolvedComment]:
    """Load a document's comments and resolve them against its current text."""
    comment_file = load_comment_file(source_path, root)
    if comment_file is None:
        return []
    return resolve_comments(document, comment_file.comments)


def write_comments(
    source_path: str | Path,
    document: str,
    comments: Iterable[Comment],
    root: Path | None = None,
) -> Path:
    """
    Save comments for a document.

    Writes to a temporary file and renames it over the destination so a
    reader never sees a partial file.

    Returns:
        Path of the written comment file
    """
    comment_path = get_comment_path(source_path, root)
    comment_path.parent.mkdir(parents=True, exist_ok=True)

    comment_file = CommentFile(
        source=str(Path(source_path).resolve()),
        hash=compute_hash(document),
        version=FORMAT_VERSION,
        comments=[_for_storage(document, comment) for comment in comments],
    )

    # one temp file per writer: concurrent saves are last-writer-wins
    descriptor, temp_name = tempfile.mkstemp(
        dir=str(comment_path.parent), prefix=f".{comment_path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(descriptor, "w", encoding="utf-8", newline="\n") as f:
            f.write(serialize_comment_file(comment_file))
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_name, comment_path)
    finally:
        if os.path.exists(temp_name):
            os.unlink(temp_name)

    logger.info(f"Saved {len(comment_file.comments)} comment(s) to {comment_path}")
    return comment_path


def delete_comment_file(source_path: str | Path, root: Path | None = None) -> bool:
    """Remove a document's comment file. Returns False if there was none."""
    comment_path = get_comment_path(source_path, root)
    try:
        comment_path.unlink()
    except FileNotFoundError:
        return False
    logger.info(f"Deleted {comment_path}")
    return True


def find_comment_files(root: Path | None = None) -> list[Path]:
    """All comment files below ``root``, sorted."""
    root = root or get_comments_root()
    if not root.is_dir():
        return []
    return sorted(root.rglob(f"*{COMMENT_FILE_SUFFIX}"))


def is_stale(comment_file: CommentFile, document: str) -> bool:
    """True when the document changed since the comments were last saved."""
    return comment_file.hash != compute_hash(document)


def _for_storage(document: str, comment: Comment) -> Comment:
    """Refresh the line hint from live offsets, then drop them."""
    if isinstance(comment, ResolvedComment):
        comment = refresh_line_hint(document, comment)
    return comment.to_stored()
