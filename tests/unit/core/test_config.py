"""Unit tests for core config parsing."""

from __future__ import annotations

import os

import pytest

from core.config import BugdashConfig
from core.constants import DEFAULT_MAX_DUPLICATE_HOPS, MAX_TEXT_LEN
from core.errors import BugdashConfigError


def test_from_env_reads_data_root(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve data root from environment."""
    monkeypatch.setenv("BUGDASH_DATA_ROOT", "./.tmp-bugdash")

    config = BugdashConfig.from_env()

    assert config.data_root.name == ".tmp-bugdash"


def test_from_env_defaults_hop_cap(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fall back to the default duplicate hop cap."""
    monkeypatch.delenv("BUGDASH_MAX_DUPLICATE_HOPS", raising=False)

    config = BugdashConfig.from_env()

    assert config.max_duplicate_hops == DEFAULT_MAX_DUPLICATE_HOPS


def test_from_env_leaves_namespaces_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should not invent a namespaces file."""
    monkeypatch.delenv("BUGDASH_NAMESPACES_FILE", raising=False)

    config = BugdashConfig.from_env()

    assert config.namespaces_path is None


def test_from_env_raises_for_invalid_hop_cap(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for a non-numeric hop cap."""
    monkeypatch.setenv("BUGDASH_MAX_DUPLICATE_HOPS", "not-a-number")

    with pytest.raises(BugdashConfigError):
        BugdashConfig.from_env()

    assert os.getenv("BUGDASH_MAX_DUPLICATE_HOPS") == "not-a-number"


def test_from_env_raises_for_non_positive_log_cap(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject a zero log cap."""
    monkeypatch.setenv("BUGDASH_MAX_LOG_LEN", "0")

    with pytest.raises(BugdashConfigError):
        BugdashConfig.from_env()


def test_from_env_defaults_short_text_cap(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fall back to the short text cap."""
    monkeypatch.delenv("BUGDASH_MAX_TEXT_LEN", raising=False)

    config = BugdashConfig.from_env()

    assert config.max_text_len == MAX_TEXT_LEN


def test_from_env_raises_for_negative_text_cap(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject a negative short text cap."""
    monkeypatch.setenv("BUGDASH_MAX_TEXT_LEN", "-5")

    with pytest.raises(BugdashConfigError):
        BugdashConfig.from_env()
