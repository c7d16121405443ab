"""Deterministic record key derivation.

This module maps identifying fields onto opaque content-hash keys.
Each key kind has its own fixed-arity method so call sites cannot
reorder or omit fields.
"""

from __future__ import annotations

import hashlib
from typing import Mapping, Sequence

from core.constants import HASH_ALGORITHM, KEY_PART_DELIMITER
from core.errors import BugdashConfigError


def derive_key(parts: Sequence[str]) -> str:
    """Hash delimiter-joined parts into a stable key.

    Parts containing the delimiter can collide with other splits of the
    same joined string; callers keep field order and content consistent.

    Args:
        parts: Ordered identifying fields.

    Returns:
        Hex digest string.
    """
    hasher = hashlib.new(HASH_ALGORITHM)
    hasher.update(KEY_PART_DELIMITER.join(parts).encode("utf-8"))
    return hasher.hexdigest()


class KeyDeriver:
    """Key factory bound to per-namespace key material."""

    def __init__(self, namespace_keys: Mapping[str, str]) -> None:
        """Create a key deriver.

        Args:
            namespace_keys: Secret key material per namespace.
        """
        self._namespace_keys = dict(namespace_keys)

    @property
    def namespaces(self) -> tuple[str, ...]:
        return tuple(sorted(self._namespace_keys))

    def bug_key(self, namespace: str, title: str, seq: int) -> str:
        """Derive the primary key of a bug.

        Args:
            namespace: Bug namespace.
            title: Stored bug title.
            seq: Zero-based duplicate sequence.

        Returns:
            Bug key.

        Raises:
            BugdashConfigError: If namespace has no configured key material.
        """
        namespace_key = self._namespace_key(namespace)
        return derive_key((namespace_key, namespace, title, str(seq)))

    def build_key(self, namespace: str, build_id: str) -> str:
        """Derive the primary key of a build.

        Raises:
            BugdashConfigError: If namespace is empty.
        """
        if not namespace:
            raise BugdashConfigError(
                f"Cannot derive build key for '{build_id}' outside of a namespace."
            )
        return derive_key((namespace, build_id))

    def bug_reporting_key(self, bug_key: str, reporting_name: str) -> str:
        """Derive the id of one bug within one reporting stage."""
        return derive_key((bug_key, reporting_name))

    def _namespace_key(self, namespace: str) -> str:
        try:
            return self._namespace_keys[namespace]
        except KeyError as error:
            configured = ", ".join(self.namespaces) or "none"
            raise BugdashConfigError(
                f"Unknown namespace '{namespace}' (configured: {configured}). "
                "Add it to the namespaces file."
            ) from error
