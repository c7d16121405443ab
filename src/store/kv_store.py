"""Key-value entity stores.

This module defines the store contract consumed by the identity and
dedup services, with an in-memory and a JSON-file implementation.
Entities are JSON-safe dictionaries addressed by (kind, key).
"""

from __future__ import annotations

import copy
import fcntl
import json
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Protocol
from urllib.parse import quote

from core.constants import COUNTERS_FILE_NAME, ENTITIES_DIR_NAME, STORE_LOCK_FILE_NAME
from core.errors import BugdashNotFoundError, BugdashStoreError


class KeyValueStore(Protocol):
    """Store contract required by bugdash services."""

    def get(self, kind: str, key: str) -> dict[str, Any]:
        """Return the entity payload or raise BugdashNotFoundError."""
        ...

    def exists(self, kind: str, key: str) -> bool:
        """Return whether an entity is stored under (kind, key)."""
        ...

    def put(self, kind: str, key: str, payload: dict[str, Any]) -> None:
        """Insert or replace the entity payload."""
        ...

    def allocate_id(self, kind: str, scope: str) -> int:
        """Return the next positive integer id for (kind, scope)."""
        ...

    def transaction(self) -> Any:
        """Return a context manager for an exclusive read-modify-write section."""
        ...


class InMemoryKeyValueStore:
    """Process-local store used by tests and ephemeral tooling."""

    def __init__(self) -> None:
        self._entities: dict[tuple[str, str], dict[str, Any]] = {}
        self._counters: dict[str, int] = {}
        self._lock = threading.RLock()

    def get(self, kind: str, key: str) -> dict[str, Any]:
        with self._lock:
            payload = self._entities.get((kind, key))
            if payload is None:
                raise BugdashNotFoundError(f"No {kind} entity stored under key {key}.")
            return copy.deepcopy(payload)

    def exists(self, kind: str, key: str) -> bool:
        with self._lock:
            return (kind, key) in self._entities

    def put(self, kind: str, key: str, payload: dict[str, Any]) -> None:
        with self._lock:
            self._entities[(kind, key)] = copy.deepcopy(payload)

    def allocate_id(self, kind: str, scope: str) -> int:
        with self._lock:
            counter_name = _counter_name(kind, scope)
            next_id = self._counters.get(counter_name, 0) + 1
            self._counters[counter_name] = next_id
            return next_id

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            yield


class JsonFileKeyValueStore:
    """Filesystem store keeping one JSON document per entity.

    Layout under the data root::

        entities/<kind>/<quoted key>.json
        counters.json
        .store.lock

    Transactions hold an advisory file lock so processes sharing a data
    root serialize their read-modify-write sections.
    """

    def __init__(self, data_root: Path) -> None:
        """Initialize the store and its directory layout.

        Args:
            data_root: Root directory for entity files.
        """
        self._data_root = data_root
        self._entities_root = data_root / ENTITIES_DIR_NAME
        self._entities_root.mkdir(parents=True, exist_ok=True)
        self._counters_path = data_root / COUNTERS_FILE_NAME
        self._lock_path = data_root / STORE_LOCK_FILE_NAME
        self._lock = threading.RLock()
        self._lock_depth = 0

    def get(self, kind: str, key: str) -> dict[str, Any]:
        """Read one entity payload.

        Raises:
            BugdashNotFoundError: If no entity file exists.
            BugdashStoreError: If the entity file cannot be read or parsed.
        """
        entity_path = self._entity_path(kind, key)
        if not entity_path.exists():
            raise BugdashNotFoundError(f"No {kind} entity stored under key {key}.")
        payload = _read_json_file(entity_path)
        if not isinstance(payload, dict):
            raise BugdashStoreError(
                f"Failed to parse {kind} entity at {entity_path}: expected JSON object."
            )
        return payload

    def exists(self, kind: str, key: str) -> bool:
        return self._entity_path(kind, key).exists()

    def put(self, kind: str, key: str, payload: dict[str, Any]) -> None:
        """Atomically write one entity payload.

        Raises:
            BugdashStoreError: If the entity cannot be written.
        """
        entity_path = self._entity_path(kind, key)
        with self.transaction():
            _write_json_file(entity_path, payload)

    def allocate_id(self, kind: str, scope: str) -> int:
        """Increment and persist the counter for (kind, scope).

        Raises:
            BugdashStoreError: If the counters file is unreadable.
        """
        with self.transaction():
            counters: dict[str, Any] = {}
            if self._counters_path.exists():
                loaded = _read_json_file(self._counters_path)
                if not isinstance(loaded, dict):
                    raise BugdashStoreError(
                        f"Failed to parse counters at {self._counters_path}: expected JSON object."
                    )
                counters = loaded
            counter_name = _counter_name(kind, scope)
            next_id = int(counters.get(counter_name, 0)) + 1
            counters[counter_name] = next_id
            _write_json_file(self._counters_path, counters)
            return next_id

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Hold the store lock; nested calls in the same thread reuse it."""
        with self._lock:
            if self._lock_depth > 0:
                self._lock_depth += 1
                try:
                    yield
                finally:
                    self._lock_depth -= 1
                return
            with self._lock_path.open("w") as lock_file:
                fcntl.flock(lock_file, fcntl.LOCK_EX)
                self._lock_depth = 1
                try:
                    yield
                finally:
                    self._lock_depth = 0
                    fcntl.flock(lock_file, fcntl.LOCK_UN)

    def _entity_path(self, kind: str, key: str) -> Path:
        if not key:
            raise BugdashStoreError(f"Cannot address {kind} entity with an empty key.")
        return self._entities_root / quote(kind, safe="") / f"{quote(key, safe='')}.json"


def _counter_name(kind: str, scope: str) -> str:
    return f"{kind}:{scope}"


def _read_json_file(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as error:
        raise BugdashStoreError(f"Failed to read {path}: {error}.") from error
    except json.JSONDecodeError as error:
        raise BugdashStoreError(
            f"Failed to parse {path}: {error.msg}. The entity file is corrupted."
        ) from error


def _write_json_file(path: Path, payload: object) -> None:
    temp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n", encoding="utf-8")
        os.replace(temp_path, path)
    except OSError as error:
        raise BugdashStoreError(f"Failed to write {path}: {error}.") from error
