"""Command-line interface for readit comment files."""

import logging
from pathlib import Path

import typer
from rich.console import Console

from readit import __version__
from readit.anchors import resolve_comments
from readit.config import SERVER_HOST, SERVER_PORT
from readit.context import DEFAULT_CONTEXT_LINES, extract_context, format_for_llm
from readit.export import EXPORT_FORMATS, render_export
from readit.logging_config import setup_logging
from readit.models import AnchorConfidence
from readit.persistence import (
    find_comment_files,
    get_comment_path,
    is_stale,
    load_comment_file,
    read_comments,
)
from readit.storage import parse_comment_file

app = typer.Typer(
    name="readit",
    help="Inspect and export review comments stored for Markdown and HTML documents.",
)
console = Console()

_CONFIDENCE_STYLE = {
    AnchorConfidence.EXACT: "green",
    AnchorConfidence.NORMALIZED: "cyan",
    AnchorConfidence.FUZZY: "yellow",
    AnchorConfidence.UNRESOLVED: "red",
}


def _read_document(file_path: Path) -> str:
    try:
        return file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[bold red]Error:[/bold red] Cannot read {file_path}: {e}")
        raise typer.Exit(1) from e


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show resolver debug output"),
) -> None:
    """readit comment tools."""
    if verbose:
        setup_logging(logging.DEBUG)


@app.command("list")
def list_files(
    root: Path | None = typer.Option(
        None, "--root", help="Comments directory (default: ~/.readit/comments)"
    ),
) -> None:
    """List all documents that have comments."""
    comment_files = find_comment_files(root)

    if not comment_files:
        console.print("No comments found.")
        return

    console.print(f"\nFound {len(comment_files)} file(s) with comments:\n")
    for path in comment_files:
        try:
            parsed = parse_comment_file(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            console.print(f"  [red]{path}[/red]: {e}")
            continue
        count = len(parsed.comments)
        console.print(f"  {parsed.source or '(unknown source)'}")
        console.print(f"    [dim]{count} comment{'s' if count != 1 else ''}[/dim]\n")


@app.command()
def show(
    file: Path = typer.Argument(..., help="Document whose comments to show"),
    root: Path | None = typer.Option(None, "--root", help="Comments directory"),
) -> None:
    """Show the comments for a document, re-anchored against its current text."""
    file_path = file.resolve()
    try:
        comment_file = load_comment_file(file_path, root)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1) from e

    if comment_file is None or not comment_file.comments:
        console.print(f"No comments found for: {file_path}")
        return

    document = _read_document(file_path) if file_path.is_file() else None

    console.print(f"\n[bold]Comments for:[/bold] {file_path}")
    if document is not None and is_stale(comment_file, document):
        console.print("[yellow]Document changed since comments were saved[/yellow]")
    console.print("─" * 60 + "\n")

    comments = (
        resolve_comments(document, comment_file.comments)
        if document is not None
        else comment_file.comments
    )
    for comment in comments:
        confidence = getattr(comment, "anchor_confidence", None)
        status = ""
        if confidence is not None:
            status = f" [{_CONFIDENCE_STYLE[confidence]}]{confidence.value}[/]"
        console.print(f"[bold]{comment.line_hint}[/bold]{status} [dim]{comment.id}[/dim]")
        for line in comment.selected_text.split("\n"):
            console.print(f"  > {line}", style="italic", markup=False, highlight=False)
        if comment.comment:
            console.print(f"\n  {comment.comment}", markup=False, highlight=False)
        console.print()


@app.command()
def export(
    file: Path = typer.Argument(..., help="Document whose comments to export"),
    fmt: str = typer.Option("prompt", "--format", "-f", help="prompt, raw, json or yaml"),
    root: Path | None = typer.Option(None, "--root", help="Comments directory"),
) -> None:
    """Print a document's comments in an export format."""
    if fmt not in EXPORT_FORMATS:
        console.print(f"[bold red]Error:[/bold red] Unknown export format: {fmt}")
        raise typer.Exit(1)

    file_path = file.resolve()
    try:
        comment_file = load_comment_file(file_path, root)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1) from e

    comments = comment_file.comments if comment_file else []
    typer.echo(render_export(fmt, comments, file_path))


@app.command()
def context(
    file: Path = typer.Argument(..., help="Document whose comments to quote"),
    lines: int = typer.Option(
        DEFAULT_CONTEXT_LINES, "--lines", "-n", min=0, help="Context lines around each selection"
    ),
    root: Path | None = typer.Option(None, "--root", help="Comments directory"),
) -> None:
    """Print each comment with the document lines around its selection."""
    file_path = file.resolve()
    if not file_path.is_file():
        console.print(f"[bold red]Error:[/bold red] File not found: {file}")
        raise typer.Exit(1)

    document = _read_document(file_path)
    try:
        comments = read_comments(file_path, document, root)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1) from e

    blocks = []
    for comment in comments:
        if not comment.resolved:
            console.print(f"[yellow]Skipping unresolved comment {comment.id}[/yellow]")
            continue
        # offsets index the raw file, so HTML is quoted as-is
        found = extract_context(
            document, comment.start_offset, comment.end_offset, lines, strip_html=False
        )
        blocks.append(format_for_llm(found, file_path.name, comment.comment or None))

    if not blocks:
        console.print(f"No resolved comments for: {file_path}")
        return
    typer.echo("\n\n".join(blocks))


@app.command("path")
def comment_path(
    file: Path = typer.Argument(..., help="Document path"),
    root: Path | None = typer.Option(None, "--root", help="Comments directory"),
) -> None:
    """Print where the comments for a document are stored."""
    typer.echo(str(get_comment_path(file, root)))


@app.command()
def serve(
    file: Path = typer.Argument(..., help="Markdown or HTML document to review"),
    host: str = typer.Option(SERVER_HOST, "--host", help="Interface to bind"),
    port: int = typer.Option(SERVER_PORT, "--port", "-p", help="Port to listen on"),
) -> None:
    """Serve the comments API for a document."""
    if not file.is_file():
        console.print(f"[bold red]Error:[/bold red] File not found: {file}")
        raise typer.Exit(1)

    from backend.main import serve as serve_app

    console.print(f"[bold]Serving[/bold] {file.resolve()} on http://{host}:{port}")
    serve_app(file, host=host, port=port)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"readit {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
