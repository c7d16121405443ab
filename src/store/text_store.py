"""Compressed text blob storage.

This module persists crash logs, reports, reproducers, and kernel
configs as gzip-compressed blobs referenced by integer ids. Id 0 is
never allocated so a reference field can hold it to mean "absent".
"""

from __future__ import annotations

import base64
import binascii
import gzip
import zlib

from core.constants import NO_TEXT_ID, TEXT_KIND, TEXT_LINK_PATH
from core.errors import BugdashConfigError, BugdashNotFoundError, BugdashStoreError
from core.logging_config import get_logger
from core.types import StoredText
from store.kv_store import KeyValueStore

_LOGGER = get_logger(__name__)


class TextBlobStore:
    """Namespace-scoped text blob store on top of a key-value store."""

    def __init__(self, store: KeyValueStore, default_max_length: int | None = None) -> None:
        """Create a text blob store.

        Args:
            store: Backing key-value store.
            default_max_length: Byte cap applied when put_text gets no explicit cap.

        Raises:
            BugdashConfigError: If default_max_length is not positive.
        """
        if default_max_length is not None:
            _check_max_length(default_max_length)
        self._store = store
        self._default_max_length = default_max_length

    def put(self, namespace: str, content: bytes) -> int:
        """Store whole content and return its blob id.

        Large documents such as reports and reproducers go through here;
        the store default cap does not apply.

        Args:
            namespace: Owning namespace.
            content: Raw bytes.

        Returns:
            Allocated blob id, or NO_TEXT_ID for empty content.
        """
        return self._put_content(namespace, content, None).text_id

    def put_text(
        self,
        namespace: str,
        content: bytes,
        max_length: int | None = None,
    ) -> StoredText:
        """Store a short text truncated to a byte cap.

        Args:
            namespace: Owning namespace.
            content: Raw bytes.
            max_length: Optional cap overriding the store default.

        Returns:
            Stored blob id together with raw and stored lengths.

        Raises:
            BugdashConfigError: If the cap is not positive.
            BugdashStoreError: If the backing store fails.
        """
        limit = max_length if max_length is not None else self._default_max_length
        if limit is not None:
            _check_max_length(limit)
        return self._put_content(namespace, content, limit)

    def _put_content(self, namespace: str, content: bytes, limit: int | None) -> StoredText:
        raw_length = len(content)
        if raw_length == 0:
            return StoredText(text_id=NO_TEXT_ID, raw_length=0, stored_length=0)
        stored_content = content[:limit] if limit is not None else content
        text_id = self._store.allocate_id(TEXT_KIND, namespace)
        payload = {
            "namespace": namespace,
            "text": base64.b64encode(gzip.compress(stored_content)).decode("ascii"),
        }
        self._store.put(TEXT_KIND, _text_key(namespace, text_id), payload)
        stored = StoredText(
            text_id=text_id,
            raw_length=raw_length,
            stored_length=len(stored_content),
        )
        if stored.truncated:
            _LOGGER.warning(
                "text_truncated",
                namespace=namespace,
                text_id=text_id,
                raw_length=stored.raw_length,
                stored_length=stored.stored_length,
            )
        _LOGGER.debug("text_stored", namespace=namespace, text_id=text_id)
        return stored

    def get(self, namespace: str, text_id: int) -> bytes:
        """Load and decompress a blob.

        Args:
            namespace: Namespace the blob was stored under.
            text_id: Blob id; NO_TEXT_ID yields empty content.

        Returns:
            Decompressed bytes.

        Raises:
            BugdashNotFoundError: If a non-sentinel id has no blob in namespace.
            BugdashStoreError: If the stored blob cannot be decoded.
        """
        if text_id == NO_TEXT_ID:
            return b""
        if text_id < 0:
            raise BugdashNotFoundError(f"Invalid text id {text_id} in namespace '{namespace}'.")
        key = _text_key(namespace, text_id)
        try:
            payload = self._store.get(TEXT_KIND, key)
        except BugdashNotFoundError as error:
            raise BugdashNotFoundError(
                f"Text {text_id} not found in namespace '{namespace}'. "
                "The referencing entity holds a stale text id."
            ) from error
        if payload.get("namespace") != namespace:
            raise BugdashNotFoundError(f"Text {text_id} not found in namespace '{namespace}'.")
        try:
            return gzip.decompress(base64.b64decode(str(payload["text"])))
        except (KeyError, binascii.Error, OSError, EOFError, zlib.error) as error:
            raise BugdashStoreError(
                f"Failed to decode text {text_id} in namespace '{namespace}': {error}."
            ) from error


def text_link(tag: str, text_id: int) -> str:
    """Build the relative link presentation layers use to fetch a blob.

    Args:
        tag: Blob kind tag, e.g. CrashLog or ReproC.
        text_id: Blob id.

    Returns:
        Relative link, or an empty string for NO_TEXT_ID.
    """
    if text_id == NO_TEXT_ID:
        return ""
    return f"{TEXT_LINK_PATH}?tag={tag}&id={text_id}"


def _text_key(namespace: str, text_id: int) -> str:
    return f"{namespace}:{text_id}"


def _check_max_length(max_length: int) -> None:
    if max_length <= 0:
        raise BugdashConfigError(
            f"Invalid text length cap: expected a positive integer, got {max_length}."
        )
