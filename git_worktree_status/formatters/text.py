"""Text measuring and truncation in terminal cells."""

import unicodedata

from rich.cells import cell_len

ELLIPSIS = "…"


def pad_to_width(text: str, width: int) -> str:
    """Left-align text in a field of `width` terminal cells."""
    return text + " " * max(0, width - cell_len(text))


def _blank_control_characters(text: str) -> str:
    """Tabs and other control characters become single spaces."""
    return "".join(" " if unicodedata.category(ch) == "Cc" else ch for ch in text)


def _fit_cells(text: str, max_cells: int) -> str:
    """Longest prefix of text that fits in max_cells."""
    used = 0
    for index, character in enumerate(text):
        used += cell_len(character)
        if used > max_cells:
            return text[:index]
    return text


def truncate_at_word_boundary(text: str, max_len: int) -> str:
    """
    Shorten the first line of text to at most max_len cells.

    Tabs and other control characters count as plain spaces. Cuts at the
    last space that fits and appends "…". A single word longer than the
    limit is cut mid-word, since there is no boundary to cut at.

    Args:
        text: Text to shorten (only the first line is kept)
        max_len: Maximum width in terminal cells, ellipsis included

    Returns:
        The shortened text
    """
    lines = text.splitlines()
    first_line = _blank_control_characters(lines[0]).strip() if lines else ""

    if cell_len(first_line) <= max_len:
        return first_line
    if max_len <= cell_len(ELLIPSIS):
        return _fit_cells(ELLIPSIS, max_len)

    cut = _fit_cells(first_line, max_len - cell_len(ELLIPSIS))
    # Keep the cut as is when it already ends at a word boundary
    if first_line[len(cut)] != " ":
        space = cut.rfind(" ")
        if space > 0:
            cut = cut[:space]
    return cut.rstrip() + ELLIPSIS
