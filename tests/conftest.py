"""
Pytest configuration and fixtures for readit tests
"""
from pathlib import Path

import pytest

from readit.logging_config import reset_indent
from readit.models import Comment, CommentFile


SAMPLE_COMMENT_FILE = """---
source: /docs/plan.md
hash: 0123456789abcdef
version: 1
---

<!-- c:1a2b3c4d|L3|2025-01-01T12:00:00+00:00 -->
> first line
> second line

Needs a citation.

---

<!-- c:5e6f7a8b|L10-12|2025-01-02T08:30:00+00:00 -->
> highlight only

---
"""


@pytest.fixture(autouse=True)
def _reset_log_indent():
    """Each test starts with a flat log tree"""
    reset_indent()
    yield
    reset_indent()


@pytest.fixture
def sample_comment_file_text() -> str:
    """Canonical comment file with two comments"""
    return SAMPLE_COMMENT_FILE


@pytest.fixture
def sample_comment_file() -> CommentFile:
    """CommentFile covering bodies, highlights and a truncated selection"""
    return CommentFile(
        source="/home/reviewer/notes/plan.md",
        hash="0123456789abcdef",
        version=1,
        comments=[
            Comment(
                id="1a2b3c4d",
                selected_text="The quick brown fox",
                comment="Is the fox really quick?",
                created_at="2025-01-01T12:00:00+00:00",
                line_hint="L3",
            ),
            Comment(
                id="5e6f7a8b",
                selected_text="jumps over\n  the lazy dog",
                comment="",
                created_at="2025-01-02T08:30:00+02:00",
                line_hint="L4-5",
            ),
            Comment(
                id="9c0d1e2f",
                selected_text="head\n...\ntail",
                comment="Long one.\n\nSecond paragraph.",
                created_at="2025-01-03T09:15:00-05:00",
                line_hint="L10-40",
                anchor_prefix="head of the original selection ",
            ),
        ],
    )


@pytest.fixture
def document_text() -> str:
    """Small Markdown document"""
    return (
        "# Plan\n"
        "\n"
        "The quick brown fox\n"
        "jumps over\n"
        "  the lazy dog.\n"
    )


@pytest.fixture
def document_path(tmp_path: Path, document_text: str) -> Path:
    """Document written to a temporary directory"""
    path = tmp_path / "docs" / "plan.md"
    path.parent.mkdir()
    path.write_text(document_text, encoding="utf-8")
    return path


@pytest.fixture
def comments_root(tmp_path: Path) -> Path:
    """Isolated comments directory"""
    return tmp_path / "comments"
