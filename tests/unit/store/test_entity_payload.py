"""Unit tests for entity payload serialization."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.errors import BugdashStoreError
from core.types import Bug, BugStatus, Crash, ReproLevel
from store.entity_payload import (
    bug_from_payload,
    bug_to_payload,
    crash_from_payload,
    crash_to_payload,
)


def test_bug_payload_roundtrip_keeps_status_and_times() -> None:
    """Bug payloads should restore enums and timestamps."""
    created = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    bug = Bug(
        namespace="upstream",
        title="foo",
        seq=2,
        status=BugStatus.DUPLICATE,
        dup_of="abc",
        repro_level=ReproLevel.C,
        first_time=created,
        commits=("fix foo",),
    )

    assert bug_from_payload(bug_to_payload(bug)) == bug


def test_bug_payload_stores_original_status_values() -> None:
    """Status numbers should match the persisted schema."""
    payload = bug_to_payload(Bug(namespace="upstream", title="foo", status=BugStatus.DUPLICATE))

    assert payload["status"] == 1002


def test_bug_from_payload_rejects_unknown_status() -> None:
    """Unknown status values indicate corrupted data."""
    payload = bug_to_payload(Bug(namespace="upstream", title="foo"))
    payload["status"] = 7

    with pytest.raises(BugdashStoreError):
        bug_from_payload(payload)


def test_crash_payload_roundtrip_keeps_repro_opts() -> None:
    """Crash payloads should restore binary reproducer options."""
    crash = Crash(
        manager="ci-upstream",
        build_id="build-1",
        time=datetime(2024, 1, 2, tzinfo=timezone.utc),
        repro_opts=b"\x00{\"threaded\":true}",
        log=3,
    )

    assert crash_from_payload(crash_to_payload(crash)) == crash
