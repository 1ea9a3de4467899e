"""
Pydantic request and response models for the comments API
"""

from pydantic import BaseModel, Field, model_validator

from readit.models import ResolvedComment


class CommentCreate(BaseModel):
    """A new comment on a selection"""
    selected_text: str = Field(min_length=1)
    comment: str = ""
    start_offset: int = Field(ge=0)
    end_offset: int = Field(ge=0)

    @model_validator(mode="after")
    def check_offsets(self) -> "CommentCreate":
        if self.start_offset > self.end_offset:
            raise ValueError("start_offset must not be after end_offset")
        return self


class CommentUpdate(BaseModel):
    """Edit a comment body, re-anchor it, or both"""
    comment: str | None = None
    selected_text: str | None = Field(default=None, min_length=1)
    start_offset: int | None = Field(default=None, ge=0)
    end_offset: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_reanchor(self) -> "CommentUpdate":
        if self.selected_text is not None and (
            self.start_offset is None or self.end_offset is None
        ):
            raise ValueError("re-anchoring requires start_offset and end_offset")
        if (
            self.start_offset is not None
            and self.end_offset is not None
            and self.start_offset > self.end_offset
        ):
            raise ValueError("start_offset must not be after end_offset")
        if self.comment is None and self.selected_text is None:
            raise ValueError("nothing to update")
        return self


class CommentResponse(BaseModel):
    """Single comment envelope"""
    comment: ResolvedComment


class CommentListResponse(BaseModel):
    """All comments of the document"""
    comments: list[ResolvedComment]


class DocumentResponse(BaseModel):
    """The reviewed document"""
    file_path: str
    file_name: str
    content: str
    hash: str
