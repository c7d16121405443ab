"""Crash text persistence helpers.

This module stores the four text blobs that accompany a crash and
renders the links presentation layers use to fetch them.
"""

from __future__ import annotations

from core.constants import (
    TEXT_TAG_CRASH_LOG,
    TEXT_TAG_CRASH_REPORT,
    TEXT_TAG_REPRO_C,
    TEXT_TAG_REPRO_SYZ,
)
from core.types import CrashTextRefs, CrashTexts
from store.text_store import TextBlobStore, text_link


def save_crash_texts(
    text_store: TextBlobStore,
    namespace: str,
    texts: CrashTexts,
    max_log_len: int,
) -> CrashTextRefs:
    """Persist crash texts and return their blob references.

    Args:
        text_store: Blob store to write into.
        namespace: Owning namespace.
        texts: Raw crash texts; empty payloads stay absent.
        max_log_len: Byte cap applied to the console log.

    Returns:
        Blob ids plus the raw report length.
    """
    stored_log = text_store.put_text(namespace, texts.log, max_length=max_log_len)
    return CrashTextRefs(
        log=stored_log.text_id,
        report=text_store.put(namespace, texts.report),
        repro_syz=text_store.put(namespace, texts.repro_syz),
        repro_c=text_store.put(namespace, texts.repro_c),
        report_len=len(texts.report),
        log_truncated=stored_log.truncated,
    )


def crash_text_links(refs: CrashTextRefs) -> dict[str, str]:
    """Map each present crash text tag to its link."""
    candidates = (
        (TEXT_TAG_CRASH_LOG, refs.log),
        (TEXT_TAG_CRASH_REPORT, refs.report),
        (TEXT_TAG_REPRO_SYZ, refs.repro_syz),
        (TEXT_TAG_REPRO_C, refs.repro_c),
    )
    links: dict[str, str] = {}
    for tag, text_id in candidates:
        link = text_link(tag, text_id)
        if link:
            links[tag] = link
    return links
