"""
Comment Service

Reads, resolves and saves the comments of the document being reviewed.
Every mutation re-reads the comment file and writes it back atomically.
"""

from pathlib import Path

from readit.errors import CommentNotFoundError
from readit.lines import format_line_hint
from readit.logging_config import logger
from readit.models import AnchorConfidence, ResolvedComment
from readit.persistence import (
    create_comment,
    delete_comment_file,
    read_comments,
    write_comments,
)
from readit.truncation import anchor_prefix_for, truncate_selection


class CommentService:
    """Comment store for a single document"""

    def __init__(self, document_path: Path, comments_root: Path | None = None):
        """
        Initialize the service.

        Args:
            document_path: Path to the reviewed document
            comments_root: Directory holding comment files (default: ~/.readit/comments)
        """
        self.document_path = Path(document_path).resolve()
        self.comments_root = comments_root

    def read_document(self) -> str:
        """Current text of the document"""
        return self.document_path.read_text(encoding="utf-8")

    def list_comments(self) -> list[ResolvedComment]:
        """
        All comments, resolved against the current document.

        Returns:
            Comments in file order; unresolved ones keep stale offsets
        """
        return read_comments(self.document_path, self.read_document(), self.comments_root)

    def get_comment(self, comment_id: str) -> ResolvedComment:
        for comment in self.list_comments():
            if comment.id == comment_id:
                return comment
        raise CommentNotFoundError(comment_id)

    def add_comment(
        self,
        selected_text: str,
        comment_text: str,
        start_offset: int,
        end_offset: int,
    ) -> ResolvedComment:
        """
        Create a comment for a selection and save it.

        Returns:
            The new comment
        """
        document = self.read_document()
        comments = read_comments(self.document_path, document, self.comments_root)
        existing = {c.id for c in comments}

        new_comment = create_comment(
            selected_text, comment_text, start_offset, end_offset, document
        )
        while new_comment.id in existing:
            new_comment = create_comment(
                selected_text, comment_text, start_offset, end_offset, document
            )

        write_comments(
            self.document_path, document, [*comments, new_comment], self.comments_root
        )
        logger.info(f"Added comment {new_comment.id} at {new_comment.line_hint}")
        return new_comment

    def update_comment(
        self,
        comment_id: str,
        comment_text: str | None = None,
        selected_text: str | None = None,
        start_offset: int | None = None,
        end_offset: int | None = None,
    ) -> ResolvedComment:
        """
        Edit a comment body and/or re-anchor it to a new selection.

        Raises:
            CommentNotFoundError: If no comment has this id
            ValueError: If a new selection is given without both offsets, or
                with start_offset after end_offset
        """
        document = self.read_document()
        comments = read_comments(self.document_path, document, self.comments_root)
        index = next((i for i, c in enumerate(comments) if c.id == comment_id), None)
        if index is None:
            raise CommentNotFoundError(comment_id)

        update: dict = {}
        if comment_text is not None:
            update["comment"] = comment_text
        if selected_text is not None:
            if start_offset is None or end_offset is None:
                raise ValueError("Re-anchoring requires start_offset and end_offset")
            if start_offset > end_offset:
                raise ValueError(
                    f"start_offset {start_offset} is after end_offset {end_offset}"
                )
            update.update(
                selected_text=truncate_selection(selected_text),
                anchor_prefix=anchor_prefix_for(selected_text),
                line_hint=format_line_hint(document, start_offset, end_offset),
                start_offset=start_offset,
                end_offset=end_offset,
                anchor_confidence=AnchorConfidence.EXACT,
            )

        comments[index] = ResolvedComment.model_validate(
            {**comments[index].model_dump(), **update}
        )
        write_comments(self.document_path, document, comments, self.comments_root)
        return comments[index]

    def delete_comment(self, comment_id: str) -> None:
        """
        Delete one comment; the comment file goes when the last one does.

        Raises:
            CommentNotFoundError: If no comment has this id
        """
        document = self.read_document()
        comments = read_comments(self.document_path, document, self.comments_root)
        remaining = [c for c in comments if c.id != comment_id]
        if len(remaining) == len(comments):
            raise CommentNotFoundError(comment_id)

        if remaining:
            write_comments(self.document_path, document, remaining, self.comments_root)
        else:
            delete_comment_file(self.document_path, self.comments_root)

    def clear_comments(self) -> None:
        """Delete every comment for the document"""
        delete_comment_file(self.document_path, self.comments_root)


# Global instance (will be initialized in main.py)
_comment_service: CommentService | None = None


def init_comment_service(document_path: Path, comments_root: Path | None = None) -> None:
    """Initialize the global comment service instance"""
    global _comment_service
    _comment_service = CommentService(document_path, comments_root)


def get_comment_service() -> CommentService:
    """
    Get the global comment service instance.

    Raises:
        RuntimeError: If the service hasn't been initialized
    """
    if _comment_service is None:
        raise RuntimeError(
            "Comment service not initialized. Call init_comment_service() first."
        )
    return _comment_service
