"""Unit tests for display title encoding."""

from __future__ import annotations

import pytest

from core.errors import BugdashTitleFormatError
from identity.title_codec import format_display_title, parse_display_title


def test_format_display_title_keeps_first_sequence() -> None:
    """Sequence zero should display the bare title."""
    assert format_display_title("WARNING in foo", 0) == "WARNING in foo"


def test_format_display_title_is_one_based() -> None:
    """Sequence one should display as the second bug."""
    assert format_display_title("WARNING in foo", 1) == "WARNING in foo (2)"


def test_parse_display_title_without_suffix() -> None:
    """Plain titles parse to sequence zero."""
    assert parse_display_title("foo") == ("foo", 0)


def test_parse_display_title_with_suffix() -> None:
    """Suffix value should be shifted back to zero-based."""
    assert parse_display_title("foo (2)") == ("foo", 1)


@pytest.mark.parametrize("seq", [0, 1, 2, 9, 41, 999_999])
def test_parse_reverses_format(seq: int) -> None:
    """Parsing a formatted title should give back the stored pair."""
    title = "general protection fault in bar"

    assert parse_display_title(format_display_title(title, seq)) == (title, seq)


def test_parse_keeps_inner_parentheses() -> None:
    """Only the trailing suffix should be interpreted."""
    assert parse_display_title("bug (in net) (3)") == ("bug (in net)", 2)


def test_parse_keeps_multi_word_parenthetical_title() -> None:
    """A trailing parenthetical with spaces is part of the title."""
    assert parse_display_title("hang (rcu stall)") == ("hang (rcu stall)", 0)


@pytest.mark.parametrize("display", ["foo (0)", "foo (abc)", "foo (-1)", "foo (1000001)"])
def test_parse_display_title_rejects_bad_suffix(display: str) -> None:
    """Zero, non-numeric, negative, and oversized suffixes are errors."""
    with pytest.raises(BugdashTitleFormatError):
        parse_display_title(display)


def test_parse_display_title_accepts_upper_bound() -> None:
    """The largest allowed suffix should still parse."""
    assert parse_display_title("foo (1000000)") == ("foo", 999_999)


@pytest.mark.parametrize("title", ["foo (bar)", "x (1a)"])
def test_first_sequence_title_with_single_token_parenthetical_is_ambiguous(title: str) -> None:
    """A seq-0 title ending in a one-token parenthetical reads back as a bad suffix."""
    with pytest.raises(BugdashTitleFormatError):
        parse_display_title(format_display_title(title, 0))
