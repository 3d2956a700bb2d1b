"""
Highlight Renderer - Wrap query occurrences in emphasis markers.
"""

from __future__ import annotations

import re
from collections.abc import Callable

__all__ = ["highlight"]


def highlight(
    text: str,
    query: str,
    open_tag: str = "<mark>",
    close_tag: str = "</mark>",
    escape: Callable[[str], str] | None = None,
) -> str:
    """
    Mark every case-insensitive occurrence of ``query`` in ``text``.

    The query is matched literally, never as a pattern. When ``escape`` is
    given (``html.escape``, ``rich.markup.escape``) it is applied to the text
    segments but not to the markers.

    Args:
        text: Display string
        query: Raw query text
        open_tag: Marker inserted before each occurrence
        close_tag: Marker inserted after each occurrence
        escape: Optional escaping for the target markup

    Returns:
        Marked-up string
    """
    escape = escape or (lambda segment: segment)

    if not query.strip():
        return escape(text)

    pattern = re.compile(f"({re.escape(query)})", re.IGNORECASE)
    pieces = pattern.split(text)

    # split() with one capture group alternates non-match, match, non-match, ...
    out = []
    for index, piece in enumerate(pieces):
        if index % 2:
            out.append(f"{open_tag}{escape(piece)}{close_tag}")
        elif piece:
            out.append(escape(piece))
    return "".join(out)
