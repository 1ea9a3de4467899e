"""
Step definitions for comment storage features
"""

from behave import given, then, when  # type: ignore[import-untyped]

from readit.models import AnchorConfidence
from readit.persistence import (
    create_comment,
    get_comment_path,
    is_stale,
    load_comment_file,
    read_comments,
    write_comments,
)
from readit.truncation import TRUNCATION_MARKER


def _document_path(context):
    return context.work_dir / "doc.md"


def _add_comment(context, body, start, end):
    comment = create_comment(
        context.document[start:end], body, start, end, context.document
    )
    context.comments = [*getattr(context, "comments", []), comment]


@given('a comment "{body}" on "{text}"')  # type: ignore[misc]
def step_given_comment_on_text(context, body, text):
    start = context.document.index(text)
    _add_comment(context, body, start, start + len(text))


@given("a document with a {length:d} character paragraph")  # type: ignore[misc]
def step_given_long_document(context, length):
    words = "lorem ipsum dolor sit amet consectetur adipiscing elit ".split()
    text = ""
    i = 0
    while len(text) < length:
        text += f"{words[i % len(words)]}{i} "
        i += 1
    context.document = text[:length] + "\n"


@given('a comment "{body}" on the whole paragraph')  # type: ignore[misc]
def step_given_comment_on_paragraph(context, body):
    _add_comment(context, body, 0, len(context.document) - 1)


@given("a comment file with format version {version:d}")  # type: ignore[misc]
def step_given_future_comment_file(context, version):
    context.document = "anything\n"
    path = get_comment_path(_document_path(context), context.comments_root)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"---\nversion: {version}\n---\n", encoding="utf-8")


@when("the comments are saved")  # type: ignore[misc]
def step_when_saved(context):
    write_comments(
        _document_path(context), context.document, context.comments, context.comments_root
    )


@when("the document becomes:")  # type: ignore[misc]
def step_when_document_changes(context):
    context.document = context.text


@when("the comments are loaded")  # type: ignore[misc]
def step_when_loaded(context):
    try:
        context.resolved = read_comments(
            _document_path(context), context.document, context.comments_root
        )
    except ValueError as e:
        context.error = e


@then("there is {count:d} comment")  # type: ignore[misc]
def step_then_count(context, count):
    assert len(context.resolved) == count, f"Expected {count}, got {len(context.resolved)}"


@then('the comment has confidence "{confidence}" and line hint "{line_hint}"')  # type: ignore[misc]
def step_then_comment_state(context, confidence, line_hint):
    comment = context.resolved[0]
    assert comment.anchor_confidence == AnchorConfidence(confidence), (
        f"Expected {confidence}, got {comment.anchor_confidence.value}"
    )
    assert comment.line_hint == line_hint, f"Expected {line_hint}, got {comment.line_hint}"


@then("the comment file is stale")  # type: ignore[misc]
def step_then_stale(context):
    comment_file = load_comment_file(_document_path(context), context.comments_root)
    assert is_stale(comment_file, context.document)


@then("the stored selection contains the truncation marker")  # type: ignore[misc]
def step_then_truncated(context):
    comment = context.resolved[0]
    assert TRUNCATION_MARKER in comment.selected_text
    assert comment.anchor_prefix == context.document[: len(comment.anchor_prefix)]


@then('loading fails with "{message}"')  # type: ignore[misc]
def step_then_load_fails(context, message):
    assert hasattr(context, "error"), "Expected loading to fail"
    assert message in str(context.error), f"Unexpected error: {context.error}"
