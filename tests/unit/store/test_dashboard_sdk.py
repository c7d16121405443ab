"""Unit tests for SDK client wiring."""

from __future__ import annotations

from dataclasses import replace

import pytest

from core.config import BugdashConfig
from core.constants import MAX_TEXT_LEN
from core.types import CrashTexts
from store.dashboard_sdk import BugdashClient
from store.kv_store import InMemoryKeyValueStore


def _client(tmp_path, namespace_keys, monkeypatch: pytest.MonkeyPatch) -> BugdashClient:
    monkeypatch.delenv("BUGDASH_MAX_TEXT_LEN", raising=False)
    config = replace(BugdashConfig.from_env(), data_root=tmp_path)
    return BugdashClient(config, store=InMemoryKeyValueStore(), namespace_keys=namespace_keys)


def test_client_caps_short_text_by_default(tmp_path, namespace_keys, monkeypatch) -> None:
    """Short texts are truncated to the default cap with the raw length kept."""
    client = _client(tmp_path, namespace_keys, monkeypatch)

    stored = client.texts.put_text("upstream", b"t" * 500)

    assert (stored.raw_length, stored.stored_length) == (500, MAX_TEXT_LEN)
    assert client.texts.get("upstream", stored.text_id) == b"t" * MAX_TEXT_LEN


def test_client_keeps_crash_report_whole(tmp_path, namespace_keys, monkeypatch) -> None:
    """Crash reports are documents and bypass the short text cap."""
    client = _client(tmp_path, namespace_keys, monkeypatch)

    refs = client.save_crash_texts("upstream", CrashTexts(log=b"log", report=b"r" * 500))

    assert client.texts.get("upstream", refs.report) == b"r" * 500


def test_with_data_root_keeps_namespace_key_override(
    tmp_path, namespace_keys, monkeypatch
) -> None:
    """Cloned clients derive the same keys as the original."""
    client = _client(tmp_path, namespace_keys, monkeypatch)

    clone = client.with_data_root(str(tmp_path / "other"))

    assert clone.key_deriver.bug_key("upstream", "foo", 0) == client.key_deriver.bug_key(
        "upstream", "foo", 0
    )
