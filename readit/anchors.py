"""
Anchor resolution for stored comments.

Re-locates a comment's selected text inside a document that may have been
edited since the comment was made. Strategies are tried from cheapest and
most certain to most tolerant:

1. Exact: literal substring search, near the line hint first
2. Normalized: whitespace-collapsed search for reflowed or reindented text
3. Fuzzy: bounded Levenshtein search for small edits inside the selection

Every strategy is a plain function returning an ``Anchor`` or ``None``.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from readit.lines import format_line_hint, get_line_number, hint_offset
from readit.logging_config import logger
from readit.matcher import (
    build_position_map,
    levenshtein_distance,
    map_span_to_original,
    normalize_whitespace,
)
from readit.models import Anchor, AnchorConfidence, Comment, ResolvedComment
from readit.truncation import ANCHOR_PREFIX_LENGTH, TRUNCATION_MARKER

# chars before/after the line hint searched by the exact strategy
DEFAULT_SEARCH_WINDOW = 500
# larger window for the normalized and fuzzy strategies
FUZZY_SEARCH_WINDOW = 2000
# max Levenshtein distance accepted as a fuzzy match
DEFAULT_FUZZY_THRESHOLD = 5
# fuzzy matching is skipped for longer selections
MAX_FUZZY_TEXT_LENGTH = 200


def _window(document: str, center: int, radius: int) -> tuple[int, int]:
    return max(0, center - radius), min(len(document), center + radius)


def _occurrences(haystack: str, needle: str) -> Iterable[int]:
    """Start offsets of every (possibly overlapping) occurrence."""
    pos = haystack.find(needle)
    while pos != -1:
        yield pos
        pos = haystack.find(needle, pos + 1)


def _closest(positions: Iterable[int], target: int) -> int | None:
    best: int | None = None
    for pos in positions:
        if best is None or abs(pos - target) < abs(best - target):
            best = pos
    return best


def _exact_anchor(document: str, start: int, length: int) -> Anchor:
    return Anchor(
        start=start,
        end=start + length,
        line=get_line_number(document, start),
        confidence=AnchorConfidence.EXACT,
    )


def find_anchor(
    document: str,
    selected_text: str,
    line_hint: str | None,
    search_window: int = DEFAULT_SEARCH_WINDOW,
) -> Anchor | None:
    """
    Locate ``selected_text`` as a literal substring.

    Searches a window around the line hint first and the whole document
    second. When the scope that produced a hit contains the text more than
    once, the occurrence closest to the hint wins.
    """
    if not selected_text or not document:
        return None

    target = hint_offset(document, line_hint)
    window_start, window_end = _window(document, target, search_window)
    window = document[window_start:window_end]

    local = _closest(
        (window_start + pos for pos in _occurrences(window, selected_text)), target
    )
    if local is not None:
        logger.debug(f"exact match near hint at {local}")
        return _exact_anchor(document, local, len(selected_text))

    found = _closest(_occurrences(document, selected_text), target)
    if found is not None:
        logger.debug(f"exact match outside hint window at {found}")
        return _exact_anchor(document, found, len(selected_text))

    return None


def find_closest_occurrence(
    document: str,
    selected_text: str,
    line_hint: str | None,
) -> Anchor | None:
    """Literal occurrence whose start is numerically closest to the hint."""
    if not selected_text or not document:
        return None

    target = hint_offset(document, line_hint)
    found = _closest(_occurrences(document, selected_text), target)
    if found is None:
        return None
    return _exact_anchor(document, found, len(selected_text))


def find_anchor_normalized(
    document: str,
    selected_text: str,
    line_hint: str | None,
    search_window: int = FUZZY_SEARCH_WINDOW,
) -> Anchor | None:
    """
    Locate ``selected_text`` after collapsing whitespace on both sides.

    Handles rewrapped paragraphs and changed indentation. The returned span
    covers the original document text, not the normalized query.
    """
    if not selected_text or not document:
        return None

    needle = normalize_whitespace(selected_text)
    if not needle or needle == selected_text:
        # nothing to collapse: the exact strategy already covered this
        return None

    target = hint_offset(document, line_hint)
    window_start, window_end = _window(document, target, search_window)
    scopes = [(window_start, window_end)]
    if (window_start, window_end) != (0, len(document)):
        scopes.append((0, len(document)))

    for scope_start, scope_end in scopes:
        position_map = build_position_map(document[scope_start:scope_end])
        index = position_map.normalized.find(needle)
        if index == -1:
            continue

        start, end = map_span_to_original(
            document, position_map, index, len(needle), base=scope_start
        )
        logger.debug(f"normalized match at {start}-{end}")
        return Anchor(
            start=start,
            end=end,
            line=get_line_number(document, start),
            confidence=AnchorConfidence.NORMALIZED,
        )

    return None


def find_anchor_fuzzy(
    document: str,
    selected_text: str,
    threshold: int = DEFAULT_FUZZY_THRESHOLD,
    line_hint: str | None = None,
) -> Anchor | None:
    """
    Locate the substring with the smallest edit distance to ``selected_text``.

    Slides windows of every length within ``threshold`` of the selection's
    length across the scope (around the line hint when one is given, the
    whole document otherwise). The best distance found so far bounds every
    later comparison. Windows whose character counts already differ from the
    selection by that much are skipped without computing a distance.

    Returns:
        The best candidate within ``threshold``, or None
    """
    if not selected_text or not document:
        return None

    text_len = len(selected_text)
    if text_len > MAX_FUZZY_TEXT_LENGTH:
        return None

    if line_hint:
        search_start, search_end = _window(
            document, hint_offset(document, line_hint), FUZZY_SEARCH_WINDOW
        )
    else:
        search_start, search_end = 0, len(document)

    best: tuple[int, int, int] | None = None  # (start, end, distance)
    best_distance = threshold + 1
    needed = Counter(selected_text)

    for length in range(max(1, text_len - threshold), text_len + threshold + 1):
        if search_end - search_start < length:
            break

        # Characters of the selection absent from the current window. Every
        # edit fixes at most one of them, so this bounds the distance from below.
        window = Counter(document[search_start : search_start + length])
        missing = sum(max(0, n - window[c]) for c, n in needed.items())

        for i in range(search_start, search_end - length + 1):
            if i > search_start:
                dropped = document[i - 1]
                window[dropped] -= 1
                if window[dropped] < needed[dropped]:
                    missing += 1
                added = document[i + length - 1]
                if window[added] < needed[added]:
                    missing -= 1
                window[added] += 1

            if max(missing, missing + length - text_len) >= best_distance:
                continue

            distance = levenshtein_distance(
                selected_text, document[i : i + length], best_distance - 1
            )
            if distance < best_distance:
                best_distance = int(distance)
                best = (i, i + length, best_distance)
                if best_distance == 0:
                    break
        if best_distance == 0:
            break

    if best is None:
        return None

    start, end, distance = best
    logger.debug(f"fuzzy match at {start}-{end} (distance {distance})")
    return Anchor(
        start=start,
        end=end,
        line=get_line_number(document, start),
        confidence=AnchorConfidence.FUZZY,
        distance=distance,
    )


def find_anchor_with_fallback(
    document: str,
    selected_text: str,
    line_hint: str | None,
    fuzzy_threshold: int = DEFAULT_FUZZY_THRESHOLD,
) -> Anchor | None:
    """
    Try exact, then normalized, then fuzzy matching.

    Returns None when all three miss; the caller keeps the comment as
    unresolved.
    """
    anchor = find_anchor(document, selected_text, line_hint)
    if anchor:
        return anchor

    anchor = find_anchor_normalized(document, selected_text, line_hint)
    if anchor:
        return anchor

    return find_anchor_fuzzy(
        document, selected_text, threshold=fuzzy_threshold, line_hint=line_hint
    )


def resolve_comment(document: str, comment: Comment) -> ResolvedComment:
    """
    Resolve a stored comment against the current document.

    Uses the anchor prefix when the stored selection was truncated. On a
    miss the comment is kept as UNRESOLVED with whatever offsets it already
    carried.
    """
    stored = comment.to_stored()
    stale_start = getattr(comment, "start_offset", 0)
    stale_end = getattr(comment, "end_offset", 0)

    line_hint = comment.line_hint or "L1"
    anchor = find_anchor_with_fallback(document, comment.matching_text, line_hint)
    if anchor is None and comment.anchor_prefix:
        # stored prefixes have their line breaks flattened; the head of the
        # truncated selection still has them
        head = comment.selected_text.split(TRUNCATION_MARKER, 1)[0][:ANCHOR_PREFIX_LENGTH]
        if head != comment.matching_text:
            anchor = find_anchor_with_fallback(document, head, line_hint)
    if anchor is None:
        logger.debug(f"comment {comment.id} unresolved")
        return ResolvedComment(
            **stored.model_dump(),
            start_offset=stale_start,
            end_offset=stale_end,
            anchor_confidence=AnchorConfidence.UNRESOLVED,
        )

    logger.debug(f"comment {comment.id} resolved ({anchor.confidence.value})")
    return ResolvedComment(
        **stored.model_dump(exclude={"line_hint"}),
        line_hint=f"L{anchor.line}",
        start_offset=anchor.start,
        end_offset=anchor.end,
        anchor_confidence=anchor.confidence,
    )


def resolve_comments(document: str, comments: Iterable[Comment]) -> list[ResolvedComment]:
    """Resolve every comment, preserving order."""
    comments = list(comments)
    with logger.indent_block(f"Resolving {len(comments)} comment(s)"):
        return [resolve_comment(document, comment) for comment in comments]


def refresh_line_hint(document: str, comment: ResolvedComment) -> ResolvedComment:
    """Recompute the stored line hint from the comment's current offsets."""
    if not comment.resolved:
        return comment
    return comment.model_copy(
        update={
            "line_hint": format_line_hint(
                document, comment.start_offset, comment.end_offset
            )
        }
    )
