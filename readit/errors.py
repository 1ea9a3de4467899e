"""Exceptions raised by the readit comment store."""


class ReaditError(Exception):
    """Base class for readit errors."""


class UnsupportedVersionError(ReaditError, ValueError):
    """
    A comment file declares a format version newer than this reader supports.

    Never degrade gracefully here: a newer format may carry fields that
    would be lost if the file were parsed and written back.
    """

    def __init__(self, required: int, supported: int) -> None:
        self.required = required
        self.supported = supported
        super().__init__(
            f"Comment file requires readit format v{required} or higher. "
            f"Current version supports format v{supported}."
        )


class CommentNotFoundError(ReaditError, KeyError):
    """No comment with the given id exists for the document."""

    def __init__(self, comment_id: str) -> None:
        self.comment_id = comment_id
        super().__init__(comment_id)

    def __str__(self) -> str:
        return f"Comment not found: {self.comment_id}"
