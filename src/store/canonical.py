"""Canonical bug resolution.

This module follows duplicate-of pointers from a bug to the terminal
record that is not itself a duplicate. Lookups are read-only; the
chain is bounded and checked for revisited keys.
"""

from __future__ import annotations

from core.constants import BUG_KIND, DEFAULT_MAX_DUPLICATE_HOPS
from core.errors import (
    BugdashDanglingDuplicateError,
    BugdashDuplicateCycleError,
    BugdashNotFoundError,
    BugdashStoreError,
)
from core.logging_config import get_logger
from core.types import Bug
from identity.key_derivation import KeyDeriver
from store.entity_payload import bug_from_payload
from store.kv_store import KeyValueStore

_LOGGER = get_logger(__name__)


class CanonicalResolver:
    """Resolve bugs to their canonical record."""

    def __init__(
        self,
        store: KeyValueStore,
        key_deriver: KeyDeriver,
        max_hops: int = DEFAULT_MAX_DUPLICATE_HOPS,
    ) -> None:
        """Create a resolver.

        Args:
            store: Key-value store holding bug entities.
            key_deriver: Key deriver used to identify visited bugs.
            max_hops: Maximum number of duplicate pointers followed.
        """
        self._store = store
        self._key_deriver = key_deriver
        self._max_hops = max_hops

    def resolve(self, bug: Bug) -> Bug:
        """Follow duplicate pointers to the canonical bug.

        Args:
            bug: Possibly-duplicate bug.

        Returns:
            The input bug when it is not a duplicate, otherwise the first
            non-duplicate bug reached.

        Raises:
            BugdashDanglingDuplicateError: If a pointer targets a missing bug.
            BugdashStoreError: If the store fails during a lookup.
            BugdashDuplicateCycleError: If the chain revisits a bug or exceeds max_hops.
        """
        if not bug.is_duplicate:
            return bug
        start_key = self._key_deriver.bug_key(bug.namespace, bug.title, bug.seq)
        visited = {start_key}
        current, current_key = bug, start_key
        hops = 0
        while current.is_duplicate:
            if hops >= self._max_hops:
                raise BugdashDuplicateCycleError(
                    f"Duplicate chain from bug {start_key} exceeds {self._max_hops} hops."
                )
            if current.dup_of in visited:
                raise BugdashDuplicateCycleError(
                    f"Duplicate chain from bug {start_key} revisits bug {current.dup_of}."
                )
            target_key = current.dup_of
            current = self._load_target(current, current_key)
            current_key = target_key
            visited.add(current_key)
            hops += 1
        _LOGGER.debug(
            "duplicate_chain_resolved",
            bug_key=start_key,
            canonical_key=current_key,
            hops=hops,
        )
        return current

    def _load_target(self, bug: Bug, bug_key: str) -> Bug:
        dangling_error = BugdashDanglingDuplicateError(
            namespace=bug.namespace,
            title=bug.title,
            seq=bug.seq,
            bug_key=bug_key,
            missing_key=bug.dup_of,
        )
        if not bug.dup_of:
            raise dangling_error
        try:
            payload = self._store.get(BUG_KIND, bug.dup_of)
        except BugdashNotFoundError as error:
            raise dangling_error from error
        except BugdashStoreError as error:
            raise BugdashStoreError(
                f"Failed to get dup bug {bug.dup_of} for {bug_key}: {error}"
            ) from error
        return bug_from_payload(payload)
