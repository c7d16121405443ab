"""Unit tests for record key derivation."""

from __future__ import annotations

import hashlib

import pytest

from core.errors import BugdashConfigError
from identity.key_derivation import KeyDeriver, derive_key


def test_derive_key_is_deterministic() -> None:
    """Identical parts should always produce the same key."""
    assert derive_key(("upstream", "KASAN: use-after-free", "0")) == derive_key(
        ("upstream", "KASAN: use-after-free", "0")
    )


def test_derive_key_is_order_sensitive() -> None:
    """Swapping fields should change the key."""
    assert derive_key(("a", "b")) != derive_key(("b", "a"))


def test_derive_key_hashes_joined_parts() -> None:
    """Key should be the SHA-256 hex digest of the dash-joined parts."""
    expected = hashlib.sha256(b"upstream-build-1").hexdigest()

    assert derive_key(("upstream", "build-1")) == expected


def test_bug_key_differs_by_sequence(namespace_keys) -> None:
    """Each duplicate sequence should own a distinct key."""
    deriver = KeyDeriver(namespace_keys)

    assert deriver.bug_key("upstream", "title", 0) != deriver.bug_key("upstream", "title", 1)


def test_bug_key_mixes_namespace_key_material() -> None:
    """Changing namespace key material should change bug keys."""
    first = KeyDeriver({"upstream": "one"}).bug_key("upstream", "title", 0)
    second = KeyDeriver({"upstream": "two"}).bug_key("upstream", "title", 0)

    assert first != second


def test_bug_key_rejects_unknown_namespace(namespace_keys) -> None:
    """Bug keys require configured namespace key material."""
    deriver = KeyDeriver(namespace_keys)

    with pytest.raises(BugdashConfigError):
        deriver.bug_key("unknown", "title", 0)


def test_build_key_rejects_empty_namespace(namespace_keys) -> None:
    """Build keys are only derived inside a namespace."""
    deriver = KeyDeriver(namespace_keys)

    with pytest.raises(BugdashConfigError):
        deriver.build_key("", "build-1")


def test_bug_reporting_key_depends_on_reporting(namespace_keys) -> None:
    """The same bug should get distinct ids per reporting stage."""
    deriver = KeyDeriver(namespace_keys)
    bug_key = deriver.bug_key("upstream", "title", 0)

    assert deriver.bug_reporting_key(bug_key, "moderation") != deriver.bug_reporting_key(
        bug_key, "public"
    )
