"""Shared typed models.

This module defines immutable entity models used by the identity,
store, SDK, and CLI layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum

from core.constants import NO_TEXT_ID
from identity.title_codec import format_display_title


class BugStatus(IntEnum):
    """Persisted bug status values.

    Closed statuses start at 1000 so open bugs sort first.
    """

    OPEN = 0
    FIXED = 1000
    INVALID = 1001
    DUPLICATE = 1002


class ReproLevel(IntEnum):
    """Best reproducer available for a bug."""

    NONE = 0
    SYZ = 1
    C = 2


@dataclass(frozen=True)
class Bug:
    """Bug record identified by (namespace, title, seq).

    Attributes:
        namespace: Namespace the bug belongs to.
        title: Stored title without the display disambiguator.
        seq: Zero-based duplicate sequence for this namespace and title.
        status: Current bug status.
        dup_of: Key of the bug this one duplicates, only when status is DUPLICATE.
        num_crashes: Number of crashes recorded for the bug.
        num_repro: Number of reproducer attempts.
        repro_level: Best reproducer level found so far.
        has_report: Whether a crash report exists.
        first_time: First crash time.
        last_time: Latest crash time.
        closed: Time the bug left the OPEN status.
        commits: Fixing commit titles.
    """

    namespace: str
    title: str
    seq: int = 0
    status: BugStatus = BugStatus.OPEN
    dup_of: str = ""
    num_crashes: int = 0
    num_repro: int = 0
    repro_level: ReproLevel = ReproLevel.NONE
    has_report: bool = False
    first_time: datetime | None = None
    last_time: datetime | None = None
    closed: datetime | None = None
    commits: tuple[str, ...] = ()

    @property
    def display_title(self) -> str:
        """Human-visible title with the one-based disambiguator."""
        return format_display_title(self.title, self.seq)

    @property
    def is_duplicate(self) -> bool:
        return self.status == BugStatus.DUPLICATE


@dataclass(frozen=True)
class Build:
    """Kernel build reported by a CI manager.

    Attributes:
        namespace: Namespace the build belongs to.
        manager: Manager instance that produced the build.
        build_id: Unique build id generated by the CI system.
        os: Target operating system.
        arch: Target architecture.
        vm_arch: Virtual machine architecture.
        syzkaller_commit: Fuzzer commit used for the build.
        compiler_id: Compiler identification string.
        kernel_repo: Kernel repository URL.
        kernel_branch: Kernel branch name.
        kernel_commit: Kernel commit hash.
        kernel_config: Text blob id of the kernel config.
    """

    namespace: str
    manager: str
    build_id: str
    os: str = ""
    arch: str = ""
    vm_arch: str = ""
    syzkaller_commit: str = ""
    compiler_id: str = ""
    kernel_repo: str = ""
    kernel_branch: str = ""
    kernel_commit: str = ""
    kernel_config: int = NO_TEXT_ID


@dataclass(frozen=True)
class Crash:
    """One observed crash with references to its text blobs.

    Attributes:
        manager: Manager instance that observed the crash.
        build_id: Build the crash happened on.
        time: Observation time.
        maintainers: Maintainer emails for the crashing code.
        log: Text blob id of the console log.
        report: Text blob id of the symbolized report.
        repro_opts: Raw reproducer options.
        repro_syz: Text blob id of the syz reproducer.
        repro_c: Text blob id of the C reproducer.
        report_len: Raw report length before truncation.
    """

    manager: str
    build_id: str
    time: datetime
    maintainers: tuple[str, ...] = ()
    log: int = NO_TEXT_ID
    report: int = NO_TEXT_ID
    repro_opts: bytes = b""
    repro_syz: int = NO_TEXT_ID
    repro_c: int = NO_TEXT_ID
    report_len: int = 0


@dataclass(frozen=True)
class StoredText:
    """Result of persisting one text blob.

    Attributes:
        text_id: Allocated blob id, NO_TEXT_ID when nothing was stored.
        raw_length: Content length before truncation.
        stored_length: Content length actually persisted.
    """

    text_id: int
    raw_length: int
    stored_length: int

    @property
    def truncated(self) -> bool:
        return self.stored_length < self.raw_length


@dataclass(frozen=True)
class CrashTexts:
    """Raw text payloads observed with one crash. Empty bytes mean absent."""

    log: bytes = b""
    report: bytes = b""
    repro_syz: bytes = b""
    repro_c: bytes = b""


@dataclass(frozen=True)
class CrashTextRefs:
    """Blob references produced by persisting CrashTexts."""

    log: int = NO_TEXT_ID
    report: int = NO_TEXT_ID
    repro_syz: int = NO_TEXT_ID
    repro_c: int = NO_TEXT_ID
    report_len: int = 0
    log_truncated: bool = False
