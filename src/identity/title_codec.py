"""Display title encoding for duplicate-disambiguated bugs.

Bugs sharing a title are told apart by a zero-based sequence number.
The displayed form appends the one-based value, e.g. ``"foo (2)"`` for
sequence 1. A literal title ending in a parenthesized number cannot be
told apart from a disambiguated one.

A trailing parenthetical is read as a sequence suffix when it is a single
token without whitespace, and any such token that is not a number in
1..MAX_DISPLAY_SEQ is a format error. Multi-word parentheticals such as
``"hang (rcu stall)"`` stay part of the title. As a consequence a
sequence-0 title ending in a one-token parenthetical, e.g. ``"foo (bar)"``,
does not round-trip through parse_display_title.
"""

from __future__ import annotations

import re

from core.constants import MAX_DISPLAY_SEQ
from core.errors import BugdashTitleFormatError

_DISPLAY_TITLE_RE = re.compile(r"(.*) \(([^()\s]+)\)")
_DIGITS_RE = re.compile(r"[0-9]+")


def format_display_title(title: str, seq: int) -> str:
    """Render a stored (title, seq) pair for display.

    Args:
        title: Stored title.
        seq: Zero-based duplicate sequence.

    Returns:
        Title unchanged for seq 0, otherwise title with a one-based suffix.
    """
    if seq == 0:
        return title
    return f"{title} ({seq + 1})"


def parse_display_title(display: str) -> tuple[str, int]:
    """Split a display title into stored title and sequence.

    Args:
        display: Human-visible title.

    Returns:
        Pair of stored title and zero-based sequence.

    Raises:
        BugdashTitleFormatError: If the suffix is not a number in range.
    """
    match = _DISPLAY_TITLE_RE.fullmatch(display)
    if match is None:
        return display, 0
    title, seq_text = match.group(1), match.group(2)
    if _DIGITS_RE.fullmatch(seq_text) is None:
        raise BugdashTitleFormatError(
            f"Failed to parse bug title {display!r}: suffix {seq_text!r} is not a number."
        )
    seq = int(seq_text)
    if seq <= 0 or seq > MAX_DISPLAY_SEQ:
        raise BugdashTitleFormatError(
            f"Failed to parse bug title {display!r}: seq={seq} is outside 1..{MAX_DISPLAY_SEQ}."
        )
    return title, seq - 1
