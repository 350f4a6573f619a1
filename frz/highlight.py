"""Truncation of cell text and splitting it into highlighted segments."""

from __future__ import annotations

import enum
from collections.abc import Iterable

from wcwidth import wcwidth

ELLIPSIS = "…"


class TruncationStyle(enum.Enum):
    """Which end of an over-long text is cut off."""

    RIGHT = "right"
    LEFT = "left"


def _char_width(ch: str) -> int:
    return max(wcwidth(ch), 0)


def _text_width(text: str) -> int:
    return sum(_char_width(ch) for ch in text)


def _prefix_len(text: str, available: int) -> int:
    used = 0
    for count, ch in enumerate(text):
        used += _char_width(ch)
        if used > available:
            return count
    return len(text)


def _suffix_len(text: str, available: int) -> int:
    used = 0
    for count, ch in enumerate(reversed(text)):
        used += _char_width(ch)
        if used > available:
            return count
    return len(text)


def truncate_with_highlight(
    text: str,
    indices: Iterable[int] | None,
    max_width: int,
    truncation: TruncationStyle,
) -> tuple[str, list[int] | None]:
    """Fit ``text`` into ``max_width`` columns and shift match indices to match."""
    index_list = list(indices) if indices is not None else None

    if max_width == 0:
        return "", None
    if _text_width(text) <= max_width:
        return text, index_list

    ellipsis_width = _text_width(ELLIPSIS)
    if max_width <= ellipsis_width:
        return ELLIPSIS, None

    available = max_width - ellipsis_width
    if truncation is TruncationStyle.RIGHT:
        limit = _prefix_len(text, available)
        adjusted = [idx for idx in index_list or () if idx < limit]
        return text[:limit] + ELLIPSIS, adjusted or None

    kept = _suffix_len(text, available)
    trimmed = len(text) - kept
    adjusted = [
        idx - trimmed + 1
        for idx in index_list or ()
        if idx >= trimmed and idx - trimmed < kept
    ]
    return ELLIPSIS + text[trimmed:], adjusted or None


def highlight_spans(
    text: str,
    indices: Iterable[int] | None,
    max_width: int | None,
    truncation: TruncationStyle,
) -> list[tuple[str, bool]]:
    """Split text into runs, each flagged whether it holds matched characters."""
    if max_width is not None:
        display, positions = truncate_with_highlight(text, indices, max_width, truncation)
    else:
        display = text
        positions = list(indices) if indices is not None else None

    if not display:
        return []
    if not positions:
        return [(display, False)]

    marked = set(positions)
    spans: list[tuple[str, bool]] = []
    buffer: list[str] = []
    highlighted = False
    for position, ch in enumerate(display):
        should_highlight = position in marked
        if should_highlight != highlighted:
            if buffer:
                spans.append(("".join(buffer), highlighted))
                buffer = []
            highlighted = should_highlight
        buffer.append(ch)
    if buffer:
        spans.append(("".join(buffer), highlighted))
    return spans