"""
readit - Review comments anchored to Markdown and HTML documents.

This library provides:
- A diff-friendly comment file format (front matter + comment blocks)
- Anchor resolution that re-locates commented text after the document
  changed: exact, whitespace-normalized and fuzzy (Levenshtein) matching
- Atomic comment file persistence and export helpers
- Surrounding-lines context for pasting a comment into an LLM prompt

Example usage:

    from readit import find_anchor_with_fallback, parse_comment_file

    comment_file = parse_comment_file(path.read_text())
    for comment in comment_file.comments:
        anchor = find_anchor_with_fallback(
            document, comment.matching_text, comment.line_hint
        )
        if anchor is None:
            print(f"{comment.id} needs re-anchoring")
"""

from readit.anchors import (
    find_anchor,
    find_anchor_fuzzy,
    find_anchor_normalized,
    find_anchor_with_fallback,
    find_closest_occurrence,
    resolve_comment,
    resolve_comments,
)
from readit.context import ContextResult, extract_context, format_for_llm
from readit.errors import CommentNotFoundError, ReaditError, UnsupportedVersionError
from readit.models import Anchor, AnchorConfidence, Comment, CommentFile, ResolvedComment
from readit.storage import FORMAT_VERSION, parse_comment_file, serialize_comment_file

__version__ = "0.1.0"

__all__ = [
    "Anchor",
    "AnchorConfidence",
    "Comment",
    "CommentFile",
    "ResolvedComment",
    "ContextResult",
    "CommentNotFoundError",
    "ReaditError",
    "UnsupportedVersionError",
    "FORMAT_VERSION",
    "extract_context",
    "find_anchor",
    "find_anchor_fuzzy",
    "find_anchor_normalized",
    "find_anchor_with_fallback",
    "find_closest_occurrence",
    "format_for_llm",
    "parse_comment_file",
    "resolve_comment",
    "resolve_comments",
    "serialize_comment_file",
]
