"""Public SDK surface for bugdash.

This module provides a stable import path for library users.
It re-exports the client, typed models, and pure identity helpers.
"""

from __future__ import annotations

from core.config import BugdashConfig
from core.types import Bug, BugStatus, Build, Crash, CrashTextRefs, CrashTexts, StoredText
from identity.key_derivation import KeyDeriver, derive_key
from identity.title_codec import format_display_title, parse_display_title
from store.dashboard_sdk import BugdashClient
from store.kv_store import InMemoryKeyValueStore, JsonFileKeyValueStore
from store.text_store import text_link

__all__ = [
    "Bug",
    "BugStatus",
    "BugdashClient",
    "BugdashConfig",
    "Build",
    "Crash",
    "CrashTextRefs",
    "CrashTexts",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyDeriver",
    "StoredText",
    "derive_key",
    "format_display_title",
    "parse_display_title",
    "text_link",
]
