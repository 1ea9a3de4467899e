"""
Step definitions for anchor resolution features
"""

from behave import given, then, when  # type: ignore[import-untyped]

from readit.anchors import resolve_comment
from readit.matcher import levenshtein_distance
from readit.models import AnchorConfidence, Comment


@given("the document:")  # type: ignore[misc]
def step_given_document(context):
    """Store the document text from the step's doc string"""
    context.document = context.text


@when('I resolve "{text}" near "{line_hint}"')  # type: ignore[misc]
def step_when_resolve(context, text, line_hint):
    """Resolve a comment on the given text against the current document"""
    comment = Comment(
        id="1a2b3c4d",
        selected_text=text,
        created_at="2025-01-01T12:00:00+00:00",
        line_hint=line_hint,
    )
    context.resolved = resolve_comment(context.document, comment)


def _span(context) -> str:
    return context.document[context.resolved.start_offset : context.resolved.end_offset]


@then('the anchor confidence is "{confidence}"')  # type: ignore[misc]
def step_then_confidence(context, confidence):
    actual = context.resolved.anchor_confidence
    assert actual == AnchorConfidence(confidence), f"Expected {confidence}, got {actual.value}"


@then('the anchor covers "{text}"')  # type: ignore[misc]
def step_then_covers(context, text):
    assert _span(context) == text, f"Expected {text!r}, got {_span(context)!r}"


@then('the anchor text starts with "{text}"')  # type: ignore[misc]
def step_then_starts_with(context, text):
    assert _span(context).startswith(text), f"Anchor text was {_span(context)!r}"


@then("the anchor is on line {line:d}")  # type: ignore[misc]
def step_then_line(context, line):
    assert context.resolved.line_hint == f"L{line}", (
        f"Expected L{line}, got {context.resolved.line_hint}"
    )


@then("the anchor distance is {distance:d}")  # type: ignore[misc]
def step_then_distance(context, distance):
    """The fuzzy distance is recomputed from the matched span"""
    actual = levenshtein_distance(context.resolved.selected_text, _span(context))
    assert actual == distance, f"Expected distance {distance}, got {actual}"


@then("the comment is unresolved")  # type: ignore[misc]
def step_then_unresolved(context):
    assert not context.resolved.resolved
    assert context.resolved.anchor_confidence == AnchorConfidence.UNRESOLVED


@then('the line hint is still "{line_hint}"')  # type: ignore[misc]
def step_then_line_hint_kept(context, line_hint):
    assert context.resolved.line_hint == line_hint
