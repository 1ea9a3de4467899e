"""
readit Backend

FastAPI backend serving one document and its review comments.
"""

import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.routers import api
from backend.services.comment_service import init_comment_service
from readit import __version__
from readit.config import SERVER_HOST, SERVER_PORT
from readit.logging_config import logger


def create_app(document_path: Path, comments_root: Path | None = None) -> FastAPI:
    """
    Build the API app for a single document.

    Args:
        document_path: Markdown or HTML file under review
        comments_root: Directory holding comment files (default: ~/.readit/comments)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_comment_service(document_path, comments_root)
        logger.info(f"Serving comments for {Path(document_path).resolve()}")
        yield

    app = FastAPI(
        title="readit API",
        description="Review comments anchored to a Markdown or HTML document",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    # Configure CORS for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:5173",  # Vite default dev server
            "http://127.0.0.1:5173",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api.router)

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": "readit API",
            "version": __version__,
            "docs": "/api/docs",
        }

    return app


def serve(document_path: Path, host: str = SERVER_HOST, port: int = SERVER_PORT) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run(create_app(document_path), host=host, port=port)


if __name__ == "__main__":
    serve(Path(os.environ["READIT_DOCUMENT"]))
