"""Shared configuration for readit."""

import os
import re
from pathlib import Path

# Base directory for readit state (override with READIT_HOME)
READIT_HOME = Path(os.environ.get("READIT_HOME", Path.home() / ".readit"))

# Comment files live under <home>/comments/<absolute source path>.comments.md
COMMENTS_DIR_NAME = "comments"
COMMENT_FILE_SUFFIX = ".comments.md"

# Server configuration
SERVER_HOST = os.environ.get("READIT_HOST", "127.0.0.1")
SERVER_PORT = int(os.environ.get("READIT_PORT", "4567"))

# Comment ids are the first 8 hex chars of a UUID4
COMMENT_ID_LENGTH = 8
COMMENT_ID_PATTERN = re.compile(r"^[0-9a-f]{8}$")

# Stored document hash: first 16 hex chars of SHA-256
HASH_LENGTH = 16
HASH_PATTERN = re.compile(r"^[0-9a-f]{16}$")

# Strict line hint form: L42 or L42-45
LINE_HINT_PATTERN = re.compile(r"^L(\d+)(?:-(\d+))?$")


def get_comments_root() -> Path:
    """Directory holding all comment files."""
    return READIT_HOME / COMMENTS_DIR_NAME


def validate_comment_id(comment_id: str) -> None:
    """Validate comment id format.

    Args:
        comment_id: The comment id to validate

    Raises:
        ValueError: If the id is not 8 lowercase hex characters
    """
    if not COMMENT_ID_PATTERN.match(comment_id):
        raise ValueError(
            f"Invalid comment id: '{comment_id}'. Expected 8 lowercase hex characters"
        )


def validate_line_hint(line_hint: str) -> None:
    """Validate line hint format.

    Args:
        line_hint: Line hint string to validate

    Raises:
        ValueError: If the hint is not of the form L<n> or L<n>-<m>
    """
    if not LINE_HINT_PATTERN.match(line_hint):
        raise ValueError(
            f"Invalid line hint: '{line_hint}'. Expected L<n> or L<n>-<m> (e.g., L42-45)"
        )


def validate_document_hash(value: str) -> None:
    """Validate a stored document hash.

    Raises:
        ValueError: If the hash is not 16 lowercase hex characters
    """
    if not HASH_PATTERN.match(value):
        raise ValueError(
            f"Invalid document hash: '{value}'. Expected {HASH_LENGTH} hex characters"
        )
