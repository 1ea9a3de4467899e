"""
API Router

REST endpoints for the comments of the reviewed document. Handlers are plain
functions so FastAPI runs anchor resolution in its threadpool.
"""

from fastapi import APIRouter, HTTPException, Response

from backend.models.comment import (
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    CommentUpdate,
    DocumentResponse,
)
from backend.services.comment_service import get_comment_service
from readit import __version__
from readit.config import validate_comment_id
from readit.errors import CommentNotFoundError, UnsupportedVersionError
from readit.persistence import compute_hash


router = APIRouter(prefix="/api", tags=["comments"])


def _check_comment_id(comment_id: str) -> None:
    try:
        validate_comment_id(comment_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get("/document", response_model=DocumentResponse)
def get_document():
    """
    Get the document under review.

    Returns:
        Path, name, content and content hash
    """
    service = get_comment_service()
    content = service.read_document()
    return DocumentResponse(
        file_path=str(service.document_path),
        file_name=service.document_path.name,
        content=content,
        hash=compute_hash(content),
    )


@router.get("/comments", response_model=CommentListResponse)
def get_comments():
    """
    Get all comments, re-anchored against the current document.

    Raises:
        HTTPException: 409 if the comment file needs a newer readit
    """
    service = get_comment_service()
    try:
        return CommentListResponse(comments=service.list_comments())
    except UnsupportedVersionError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.get("/comments/{comment_id}", response_model=CommentResponse)
def get_comment(comment_id: str):
    """
    Get a single comment, re-anchored against the current document.

    Raises:
        HTTPException: 400 for a malformed id, 404 if the comment does not exist
    """
    _check_comment_id(comment_id)
    service = get_comment_service()
    try:
        return CommentResponse(comment=service.get_comment(comment_id))
    except CommentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except UnsupportedVersionError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.post("/comments", response_model=CommentResponse, status_code=201)
def add_comment(body: CommentCreate):
    """
    Add a comment for a selection.

    Returns:
        The created comment
    """
    service = get_comment_service()
    try:
        comment = service.add_comment(
            body.selected_text, body.comment, body.start_offset, body.end_offset
        )
    except UnsupportedVersionError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return CommentResponse(comment=comment)


@router.put("/comments/{comment_id}", response_model=CommentResponse)
def update_comment(comment_id: str, body: CommentUpdate):
    """
    Update a comment body or re-anchor it to a new selection.

    Raises:
        HTTPException: 400 for a malformed id, 404 if the comment does not exist
    """
    _check_comment_id(comment_id)
    service = get_comment_service()
    try:
        comment = service.update_comment(
            comment_id,
            comment_text=body.comment,
            selected_text=body.selected_text,
            start_offset=body.start_offset,
            end_offset=body.end_offset,
        )
    except CommentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except UnsupportedVersionError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return CommentResponse(comment=comment)


@router.delete("/comments/{comment_id}", status_code=204)
def delete_comment(comment_id: str):
    """
    Delete a single comment.

    Raises:
        HTTPException: 400 for a malformed id, 404 if the comment does not exist
    """
    _check_comment_id(comment_id)
    service = get_comment_service()
    try:
        service.delete_comment(comment_id)
    except CommentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except UnsupportedVersionError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return Response(status_code=204)


@router.delete("/comments", status_code=204)
def clear_comments():
    """Delete every comment of the document."""
    get_comment_service().clear_comments()
    return Response(status_code=204)


@router.get("/health")
def health_check():
    """
    Health check endpoint.

    Returns:
        Status information
    """
    service = get_comment_service()
    return {
        "status": "healthy",
        "document": str(service.document_path),
        "version": __version__,
    }
