"""Bug, build, and crash entity persistence.

This module owns bug creation with per-title sequence allocation,
lookups by key or display title, and duplicate marking. Every
read-then-write step runs inside a store transaction.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone

from core.constants import BUG_KIND, BUILD_KIND, CRASH_KIND, MAX_DISPLAY_SEQ
from core.errors import BugdashBugStateError, BugdashNotFoundError, BugdashStoreError
from core.logging_config import get_logger
from core.types import Bug, BugStatus, Build, Crash
from identity.key_derivation import KeyDeriver
from identity.title_codec import parse_display_title
from store.canonical import CanonicalResolver
from store.entity_payload import (
    bug_from_payload,
    bug_to_payload,
    build_from_payload,
    build_to_payload,
    crash_from_payload,
    crash_to_payload,
)
from store.kv_store import KeyValueStore

_LOGGER = get_logger(__name__)


class BugStore:
    """Entity store for bugs and the records hanging off them."""

    def __init__(
        self,
        store: KeyValueStore,
        key_deriver: KeyDeriver,
        resolver: CanonicalResolver,
    ) -> None:
        """Create a bug store.

        Args:
            store: Backing key-value store.
            key_deriver: Key deriver for bug and build keys.
            resolver: Resolver used to point new duplicates at canonical bugs.
        """
        self._store = store
        self._key_deriver = key_deriver
        self._resolver = resolver

    def bug_key(self, bug: Bug) -> str:
        return self._key_deriver.bug_key(bug.namespace, bug.title, bug.seq)

    def create_bug(self, namespace: str, title: str, now: datetime | None = None) -> Bug:
        """Create an open bug under the next unused sequence for its title.

        Args:
            namespace: Bug namespace.
            title: Stored title without a display suffix.
            now: Creation time, defaults to current UTC time.

        Returns:
            Persisted bug.

        Raises:
            BugdashStoreError: If no sequence is free or the store fails.
        """
        created_at = now or datetime.now(timezone.utc)
        with self._store.transaction():
            seq = self._next_free_seq(namespace, title)
            bug = Bug(
                namespace=namespace,
                title=title,
                seq=seq,
                first_time=created_at,
                last_time=created_at,
            )
            self.save_bug(bug)
        _LOGGER.info("bug_created", namespace=namespace, title=title, seq=seq)
        return bug

    def save_bug(self, bug: Bug) -> str:
        """Insert or replace a bug and return its key."""
        bug_key = self.bug_key(bug)
        self._store.put(BUG_KIND, bug_key, bug_to_payload(bug))
        return bug_key

    def load_bug(self, namespace: str, title: str, seq: int) -> Bug:
        """Load a bug by its identifying fields.

        Raises:
            BugdashNotFoundError: If the bug does not exist.
        """
        return self.load_bug_by_key(self._key_deriver.bug_key(namespace, title, seq))

    def load_bug_by_key(self, bug_key: str) -> Bug:
        """Load a bug by key.

        Raises:
            BugdashNotFoundError: If the bug does not exist.
            BugdashStoreError: If the stored payload is invalid.
        """
        return bug_from_payload(self._store.get(BUG_KIND, bug_key))

    def load_bug_by_display_title(self, namespace: str, display: str) -> Bug:
        """Load a bug from its human-visible title.

        Raises:
            BugdashTitleFormatError: If the display suffix is malformed.
            BugdashNotFoundError: If the bug does not exist.
        """
        title, seq = parse_display_title(display)
        try:
            return self.load_bug(namespace, title, seq)
        except BugdashNotFoundError as error:
            raise BugdashNotFoundError(
                f"Unknown bug {namespace}/{display!r}."
            ) from error

    def mark_duplicate(self, bug: Bug, target: Bug) -> Bug:
        """Mark a bug as a duplicate of the canonical record of target.

        Args:
            bug: Bug to mark.
            target: Bug it duplicates, possibly itself a duplicate.

        Returns:
            Persisted duplicate bug.

        Raises:
            BugdashBugStateError: If the bug is already a duplicate or the
                mark would form a cycle.
            BugdashNotFoundError: If either bug is not stored.
        """
        with self._store.transaction():
            current = self.load_bug(bug.namespace, bug.title, bug.seq)
            bug_key = self.bug_key(current)
            if current.is_duplicate:
                raise BugdashBugStateError(
                    f"Bug {bug_key} is already a duplicate of {current.dup_of}."
                )
            canonical = self._resolver.resolve(
                self.load_bug(target.namespace, target.title, target.seq)
            )
            canonical_key = self.bug_key(canonical)
            if canonical_key == bug_key:
                raise BugdashBugStateError(
                    f"Bug {bug_key} cannot be marked as a duplicate of itself."
                )
            duplicate = replace(
                current,
                status=BugStatus.DUPLICATE,
                dup_of=canonical_key,
                closed=current.closed or datetime.now(timezone.utc),
            )
            self.save_bug(duplicate)
        _LOGGER.info("bug_marked_duplicate", bug_key=bug_key, canonical_key=canonical_key)
        return duplicate

    def save_build(self, build: Build) -> str:
        """Insert or replace a build and return its key."""
        build_key = self._key_deriver.build_key(build.namespace, build.build_id)
        self._store.put(BUILD_KIND, build_key, build_to_payload(build))
        return build_key

    def load_build(self, namespace: str, build_id: str) -> Build:
        """Load a build.

        Raises:
            BugdashNotFoundError: If the build does not exist.
            BugdashStoreError: If the store fails.
        """
        build_key = self._key_deriver.build_key(namespace, build_id)
        try:
            payload = self._store.get(BUILD_KIND, build_key)
        except BugdashNotFoundError as error:
            raise BugdashNotFoundError(f"unknown build {namespace}/{build_id}") from error
        except BugdashStoreError as error:
            raise BugdashStoreError(
                f"failed to get build {namespace}/{build_id}: {error}"
            ) from error
        return build_from_payload(payload)

    def save_crash(self, bug: Bug, crash: Crash) -> int:
        """Store a crash under a bug and return its per-bug crash id."""
        bug_key = self.bug_key(bug)
        crash_id = self._store.allocate_id(CRASH_KIND, bug_key)
        self._store.put(CRASH_KIND, _crash_key(bug_key, crash_id), crash_to_payload(crash))
        return crash_id

    def load_crash(self, bug: Bug, crash_id: int) -> Crash:
        """Load one crash of a bug.

        Raises:
            BugdashNotFoundError: If the crash does not exist.
        """
        payload = self._store.get(CRASH_KIND, _crash_key(self.bug_key(bug), crash_id))
        return crash_from_payload(payload)

    def _next_free_seq(self, namespace: str, title: str) -> int:
        for seq in range(MAX_DISPLAY_SEQ):
            if not self._store.exists(BUG_KIND, self._key_deriver.bug_key(namespace, title, seq)):
                return seq
        raise BugdashStoreError(
            f"No free sequence left for bug {namespace}/{title!r}."
        )


def _crash_key(bug_key: str, crash_id: int) -> str:
    return f"{bug_key}:{crash_id}"
