"""Size limits for stored selections."""

MAX_SELECTION_LENGTH = 1000
TRUNCATION_MARKER = "\n...\n"
# Chars of the untruncated selection kept for anchor matching
ANCHOR_PREFIX_LENGTH = 200


def needs_truncation(text: str) -> bool:
    return len(text) > MAX_SELECTION_LENGTH


def truncate_selection(text: str) -> str:
    """
    Shorten a long selection to its head and tail joined by a marker.

    Texts of at most ``MAX_SELECTION_LENGTH`` characters are returned as-is.
    """
    if not needs_truncation(text):
        return text
    half = (MAX_SELECTION_LENGTH - len(TRUNCATION_MARKER)) // 2
    return text[:half] + TRUNCATION_MARKER + text[-half:]


def anchor_prefix_for(text: str) -> str | None:
    """Matching prefix to store alongside a truncated selection, else None."""
    if not needs_truncation(text):
        return None
    return text[:ANCHOR_PREFIX_LENGTH]
