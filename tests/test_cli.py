"""Tests for the readit command line."""

import json
from pathlib import Path

from typer.testing import CliRunner

from readit import __version__
from readit.cli import app
from readit.persistence import create_comment, get_comment_path, write_comments

runner = CliRunner()


def _save_comment(document_path: Path, document_text: str, comments_root: Path, text: str):
    start = document_text.index(text)
    comment = create_comment(text, "A note", start, start + len(text), document_text)
    write_comments(document_path, document_text, [comment], comments_root)
    return comment


class TestListCommand:
    """Tests for `readit list`."""

    def test_no_comments(self, comments_root: Path) -> None:
        result = runner.invoke(app, ["list", "--root", str(comments_root)])

        assert result.exit_code == 0
        assert "No comments found." in result.output

    def test_counts_comments(
        self, document_path: Path, document_text: str, comments_root: Path
    ) -> None:
        _save_comment(document_path, document_text, comments_root, "quick brown")

        result = runner.invoke(app, ["list", "--root", str(comments_root)])

        assert result.exit_code == 0
        assert "Found 1 file(s) with comments" in result.output
        assert "1 comment" in result.output


class TestShowCommand:
    """Tests for `readit show`."""

    def test_shows_resolved_comment(
        self, document_path: Path, document_text: str, comments_root: Path
    ) -> None:
        comment = _save_comment(document_path, document_text, comments_root, "quick brown")

        result = runner.invoke(app, ["show", str(document_path), "--root", str(comments_root)])

        assert result.exit_code == 0
        assert comment.id in result.output
        assert "exact" in result.output
        assert "> quick brown" in result.output
        assert "A note" in result.output

    def test_warns_when_document_changed(
        self, document_path: Path, document_text: str, comments_root: Path
    ) -> None:
        _save_comment(document_path, document_text, comments_root, "quick brown")
        document_path.write_text("Preface.\n\n" + document_text, encoding="utf-8")

        result = runner.invoke(app, ["show", str(document_path), "--root", str(comments_root)])

        assert result.exit_code == 0
        assert "Document changed" in result.output
        assert "L5" in result.output

    def test_no_comments(self, document_path: Path, comments_root: Path) -> None:
        result = runner.invoke(app, ["show", str(document_path), "--root", str(comments_root)])

        assert result.exit_code == 0
        assert "No comments found" in result.output

    def test_newer_format_fails(self, document_path: Path, comments_root: Path) -> None:
        path = get_comment_path(document_path, comments_root)
        path.parent.mkdir(parents=True)
        path.write_text("---\nversion: 2\n---\n", encoding="utf-8")

        result = runner.invoke(app, ["show", str(document_path), "--root", str(comments_root)])

        assert result.exit_code == 1
        assert "format v2" in result.output

    def test_undecodable_document_fails(
        self, document_path: Path, document_text: str, comments_root: Path
    ) -> None:
        """A document that is not UTF-8 is an error, not a traceback."""
        _save_comment(document_path, document_text, comments_root, "quick brown")
        document_path.write_bytes(b"\xff\xfe\xfa not utf-8")

        result = runner.invoke(app, ["show", str(document_path), "--root", str(comments_root)])

        assert result.exit_code == 1
        assert "Cannot read" in result.output
        assert not isinstance(result.exception, UnicodeDecodeError)


class TestContextCommand:
    """Tests for `readit context`."""

    def test_quotes_surrounding_lines(
        self, document_path: Path, document_text: str, comments_root: Path
    ) -> None:
        _save_comment(document_path, document_text, comments_root, "quick brown")

        result = runner.invoke(
            app, ["context", str(document_path), "--root", str(comments_root)]
        )

        assert result.exit_code == 0
        assert "# From: plan.md" in result.output
        assert "Lines 3-3:" in result.output
        assert "The >>> quick brown <<< fox" in result.output
        assert "Comment: A note" in result.output

    def test_follows_moved_text(
        self, document_path: Path, document_text: str, comments_root: Path
    ) -> None:
        _save_comment(document_path, document_text, comments_root, "lazy dog")
        document_path.write_text("Preface.\n\n" + document_text, encoding="utf-8")

        result = runner.invoke(
            app, ["context", str(document_path), "-n", "0", "--root", str(comments_root)]
        )

        assert result.exit_code == 0
        assert "Lines 7-7:" in result.output
        assert "---\n  the >>> lazy dog <<<.\n---" in result.output

    def test_skips_unresolved(
        self, document_path: Path, document_text: str, comments_root: Path
    ) -> None:
        _save_comment(document_path, document_text, comments_root, "quick brown")
        document_path.write_text("0000000000\n" * 3, encoding="utf-8")

        result = runner.invoke(
            app, ["context", str(document_path), "--root", str(comments_root)]
        )

        assert result.exit_code == 0
        assert "Skipping unresolved comment" in result.output
        assert "No resolved comments" in result.output

    def test_missing_document(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["context", str(tmp_path / "missing.md")])

        assert result.exit_code == 1
        assert "File not found" in result.output


class TestExportCommand:
    """Tests for `readit export`."""

    def test_json(self, document_path: Path, document_text: str, comments_root: Path) -> None:
        _save_comment(document_path, document_text, comments_root, "lazy dog")

        result = runner.invoke(
            app, ["export", str(document_path), "-f", "json", "--root", str(comments_root)]
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["fileName"] == "plan.md"
        assert data["comments"][0]["selectedText"] == "lazy dog"

    def test_default_prompt_format(
        self, document_path: Path, document_text: str, comments_root: Path
    ) -> None:
        _save_comment(document_path, document_text, comments_root, "lazy dog")

        result = runner.invoke(app, ["export", str(document_path), "--root", str(comments_root)])

        assert result.exit_code == 0
        assert result.output.startswith("# Review Comments for plan.md")

    def test_unknown_format(self, document_path: Path, comments_root: Path) -> None:
        result = runner.invoke(
            app, ["export", str(document_path), "-f", "pdf", "--root", str(comments_root)]
        )

        assert result.exit_code == 1
        assert "Unknown export format" in result.output


def test_path_command(document_path: Path, comments_root: Path) -> None:
    result = runner.invoke(app, ["path", str(document_path), "--root", str(comments_root)])

    assert result.exit_code == 0
    assert result.output.strip() == str(get_comment_path(document_path, comments_root))


def test_serve_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["serve", str(tmp_path / "missing.md")])

    assert result.exit_code == 1
    assert "File not found" in result.output


def test_version() -> None:
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output
