"""Core constants used across bugdash modules.

This module centralizes storage layout names, entity kinds, and limits.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".bugdash")
ENTITIES_DIR_NAME = "entities"
COUNTERS_FILE_NAME = "counters.json"
STORE_LOCK_FILE_NAME = ".store.lock"
HASH_ALGORITHM = "sha256"
KEY_PART_DELIMITER = "-"
BUG_KIND = "Bug"
BUILD_KIND = "Build"
TEXT_KIND = "Text"
CRASH_KIND = "Crash"
NO_TEXT_ID = 0
MAX_DISPLAY_SEQ = 1_000_000
DEFAULT_MAX_DUPLICATE_HOPS = 100
DEFAULT_MAX_LOG_LEN = 1_000_000
MAX_TEXT_LEN = 200
DEFAULT_LOG_LEVEL = "INFO"
TEXT_LINK_PATH = "/text"
TEXT_TAG_CRASH_LOG = "CrashLog"
TEXT_TAG_CRASH_REPORT = "CrashReport"
TEXT_TAG_REPRO_SYZ = "ReproSyz"
TEXT_TAG_REPRO_C = "ReproC"
TEXT_TAG_KERNEL_CONFIG = "KernelConfig"
TEXT_TAGS = (
    TEXT_TAG_CRASH_LOG,
    TEXT_TAG_CRASH_REPORT,
    TEXT_TAG_REPRO_SYZ,
    TEXT_TAG_REPRO_C,
    TEXT_TAG_KERNEL_CONFIG,
)
