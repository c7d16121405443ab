"""Unit tests for crash text persistence."""

from __future__ import annotations

from core.constants import NO_TEXT_ID
from core.types import CrashTexts
from store.crash_texts import crash_text_links, save_crash_texts
from store.kv_store import InMemoryKeyValueStore
from store.text_store import TextBlobStore


def test_save_crash_texts_leaves_absent_texts_at_sentinel() -> None:
    """Missing reproducers should keep the absent marker."""
    text_store = TextBlobStore(InMemoryKeyValueStore())

    refs = save_crash_texts(
        text_store, "upstream", CrashTexts(log=b"log", report=b"report"), 100
    )

    assert refs.repro_syz == NO_TEXT_ID and refs.repro_c == NO_TEXT_ID


def test_save_crash_texts_truncates_log_only() -> None:
    """The log cap should not apply to the report."""
    text_store = TextBlobStore(InMemoryKeyValueStore())
    texts = CrashTexts(log=b"l" * 10, report=b"r" * 10)

    refs = save_crash_texts(text_store, "upstream", texts, 4)

    assert text_store.get("upstream", refs.log) == b"llll"
    assert text_store.get("upstream", refs.report) == b"r" * 10
    assert refs.log_truncated and refs.report_len == 10


def test_crash_text_links_skip_absent_texts() -> None:
    """Only stored texts should get links."""
    text_store = TextBlobStore(InMemoryKeyValueStore())
    refs = save_crash_texts(text_store, "upstream", CrashTexts(repro_c=b"int main() {}"), 100)

    links = crash_text_links(refs)

    assert links == {"ReproC": f"/text?tag=ReproC&id={refs.repro_c}"}
