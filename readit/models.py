"""
Pydantic models for comments and resolved anchors.

The persisted ``Comment`` and the in-memory ``ResolvedComment`` are kept as
separate types: character offsets and anchor confidence only exist after a
resolution pass against a concrete document snapshot.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class AnchorConfidence(str, Enum):
    """Which resolution strategy located a comment's text."""

    EXACT = "exact"
    NORMALIZED = "normalized"
    FUZZY = "fuzzy"
    UNRESOLVED = "unresolved"


class Anchor(BaseModel):
    """
    A located span inside a document.

    Attributes:
        start: Character offset where the span begins
        end: Character offset where the span ends (exclusive)
        line: 1-indexed line containing ``start``
        confidence: Strategy that produced the match (never UNRESOLVED)
        distance: Levenshtein distance, fuzzy matches only
    """

    start: int
    end: int
    line: int
    confidence: AnchorConfidence
    distance: int | None = None

    @model_validator(mode="after")
    def _check_span(self) -> Anchor:
        if self.confidence == AnchorConfidence.UNRESOLVED:
            raise ValueError("an Anchor is always resolved")
        if self.start > self.end:
            raise ValueError(f"anchor start {self.start} is after end {self.end}")
        return self


class Comment(BaseModel):
    """
    One user annotation as stored on disk.

    Attributes:
        id: 8-character lowercase hex token, unique within a comment file
        selected_text: Anchored text, truncated when the selection was long
        comment: Note body; empty means highlight only
        created_at: ISO-8601 timestamp with offset
        line_hint: Last known location, "L42" or "L42-45"
        anchor_prefix: First 200 chars of the untruncated selection, only
            present when ``selected_text`` was truncated
    """

    id: str
    selected_text: str
    comment: str = ""
    created_at: str
    line_hint: str = ""
    anchor_prefix: str | None = None

    @property
    def matching_text(self) -> str:
        """Text the resolver should search for."""
        return self.anchor_prefix or self.selected_text

    def to_stored(self) -> Comment:
        """Drop any resolution fields."""
        return Comment(**self.model_dump(include=set(Comment.model_fields)))


class ResolvedComment(Comment):
    """
    A comment plus the outcome of resolving it against a document.

    When ``anchor_confidence`` is UNRESOLVED the offsets are a stale hint and
    must not be trusted.
    """

    start_offset: int = 0
    end_offset: int = 0
    anchor_confidence: AnchorConfidence = AnchorConfidence.UNRESOLVED

    @model_validator(mode="after")
    def _check_offsets(self) -> ResolvedComment:
        if self.start_offset > self.end_offset:
            raise ValueError(
                f"start_offset {self.start_offset} is after end_offset {self.end_offset}"
            )
        return self

    @property
    def resolved(self) -> bool:
        return self.anchor_confidence != AnchorConfidence.UNRESOLVED


class CommentFile(BaseModel):
    """
    All comments for one document.

    Attributes:
        source: Absolute path of the annotated document
        hash: First 16 hex chars of the SHA-256 of the document at last save
        version: Format version of the file
        comments: Comments in insertion order
    """

    source: str = ""
    hash: str = ""
    version: int = Field(default=1, ge=1)
    comments: list[Comment] = []

    @model_validator(mode="after")
    def _check_unique_ids(self) -> CommentFile:
        seen: set[str] = set()
        for comment in self.comments:
            if comment.id in seen:
                raise ValueError(f"duplicate comment id: {comment.id}")
            seen.add(comment.id)
        return self
