"""Bugdash exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class BugdashError(Exception):
    """Base exception for all bugdash failures."""


class BugdashConfigError(BugdashError):
    """Raised for invalid runtime configuration."""


class BugdashDependencyError(BugdashError):
    """Raised when an optional runtime dependency is missing."""


class BugdashNotFoundError(BugdashError):
    """Raised when a requested entity does not exist."""


class BugdashStoreError(BugdashError):
    """Raised for underlying key-value store failures."""


class BugdashTitleFormatError(BugdashError):
    """Raised for malformed duplicate-disambiguated display titles."""


class BugdashBugStateError(BugdashError):
    """Raised for invalid bug status transitions."""


class BugdashDanglingDuplicateError(BugdashError):
    """Raised when a duplicate pointer references a missing bug.

    Attributes:
        namespace: Namespace of the bug holding the dangling pointer.
        title: Title of the bug holding the dangling pointer.
        seq: Sequence number of the bug holding the dangling pointer.
        bug_key: Key of the bug holding the dangling pointer.
        missing_key: Key the pointer refers to.
    """

    def __init__(
        self,
        namespace: str,
        title: str,
        seq: int,
        bug_key: str,
        missing_key: str,
    ) -> None:
        self.namespace = namespace
        self.title = title
        self.seq = seq
        self.bug_key = bug_key
        self.missing_key = missing_key
        super().__init__(
            f"Bug {namespace}/{title!r} (seq={seq}, key={bug_key}) is marked as a "
            f"duplicate of missing bug {missing_key}. "
            "Repair the duplicate pointer before resolving this bug."
        )


class BugdashDuplicateCycleError(BugdashError):
    """Raised when following duplicate pointers does not terminate."""
