"""Export formats for a document's comments."""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

import yaml

from readit.models import Comment

EXPORT_FORMATS = ("prompt", "raw", "json", "yaml")


def generate_prompt(comments: Sequence[Comment], file_name: str) -> str:
    """Review comments as a prompt for an LLM."""
    entries = "\n\n".join(
        f'---\nSelected text: "{c.selected_text}"\nComment: {c.comment}' for c in comments
    )
    return f"# Review Comments for {file_name}\n\n{entries}"


def generate_raw_text(comments: Sequence[Comment]) -> str:
    """Selections and comment bodies only."""
    return "\n\n---\n\n".join(f"{c.selected_text}\n\n{c.comment}" for c in comments)


def export_comments(
    comments: Sequence[Comment],
    file_path: str | Path,
    now: datetime | None = None,
) -> dict:
    """Plain data for the JSON and YAML exports."""
    path = Path(file_path)
    return {
        "filePath": str(path),
        "fileName": path.name,
        "exportedAt": (now or datetime.now(timezone.utc)).isoformat(),
        "comments": [
            {
                "selectedText": c.selected_text,
                "comment": c.comment,
                "createdAt": c.created_at,
            }
            for c in comments
        ],
    }


def export_comments_json(
    comments: Sequence[Comment], file_path: str | Path, now: datetime | None = None
) -> str:
    return json.dumps(export_comments(comments, file_path, now), indent=2, ensure_ascii=False)


def export_comments_yaml(
    comments: Sequence[Comment], file_path: str | Path, now: datetime | None = None
) -> str:
    return yaml.safe_dump(
        export_comments(comments, file_path, now),
        allow_unicode=True,
        sort_keys=False,
        width=100,
    )


def render_export(
    fmt: str,
    comments: Sequence[Comment],
    file_path: str | Path,
    now: datetime | None = None,
) -> str:
    """
    Render comments in one of ``EXPORT_FORMATS``.

    Raises:
        ValueError: If the format is unknown
    """
    if fmt == "prompt":
        return generate_prompt(comments, Path(file_path).name)
    if fmt == "raw":
        return generate_raw_text(comments)
    if fmt == "json":
        return export_comments_json(comments, file_path, now)
    if fmt == "yaml":
        return export_comments_yaml(comments, file_path, now)
    raise ValueError(
        f"Unknown export format: '{fmt}'. Expected one of {', '.join(EXPORT_FORMATS)}"
    )
