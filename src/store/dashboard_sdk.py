"""Python SDK for dashboard entity operations.

This module wires configuration, the entity store, key derivation,
and the dedup services into one client object.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from core.config import BugdashConfig
from core.namespaces import load_namespace_keys
from core.types import Bug, CrashTextRefs, CrashTexts
from identity.key_derivation import KeyDeriver
from store.bug_store import BugStore
from store.canonical import CanonicalResolver
from store.crash_texts import save_crash_texts
from store.kv_store import JsonFileKeyValueStore, KeyValueStore
from store.text_store import TextBlobStore


class BugdashClient:
    """Primary SDK entry point."""

    def __init__(
        self,
        config: BugdashConfig | None = None,
        store: KeyValueStore | None = None,
        namespace_keys: dict[str, str] | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            store: Optional key-value store; a JSON-file store under the
                config data root when omitted.
            namespace_keys: Optional key material overriding the namespaces file.
        """
        self._config = config or BugdashConfig.from_env()
        self._kv_store = store or JsonFileKeyValueStore(self._config.data_root)
        self._namespace_keys = namespace_keys
        if namespace_keys is None:
            namespace_keys = load_namespace_keys(self._config.namespaces_path)
        self.key_deriver = KeyDeriver(namespace_keys)
        self.resolver = CanonicalResolver(
            self._kv_store,
            self.key_deriver,
            max_hops=self._config.max_duplicate_hops,
        )
        self.bugs = BugStore(self._kv_store, self.key_deriver, self.resolver)
        self.texts = TextBlobStore(
            self._kv_store,
            default_max_length=self._config.max_text_len,
        )

    @property
    def config(self) -> BugdashConfig:
        return self._config

    def canonical_bug(self, bug: Bug) -> Bug:
        """Return the canonical record for a possibly-duplicate bug."""
        return self.resolver.resolve(bug)

    def canonical_bug_by_display_title(self, namespace: str, display: str) -> Bug:
        """Load a bug by display title and resolve it."""
        return self.resolver.resolve(self.bugs.load_bug_by_display_title(namespace, display))

    def save_crash_texts(self, namespace: str, texts: CrashTexts) -> CrashTextRefs:
        """Persist crash texts using the configured log cap."""
        return save_crash_texts(self.texts, namespace, texts, self._config.max_log_len)

    def with_data_root(self, data_root: str) -> "BugdashClient":
        """Clone the client with a different local data root.

        Args:
            data_root: New data root path.

        Returns:
            New SDK client using a JSON-file store under data_root and the
            same namespace key override, if any.
        """
        resolved_root = Path(data_root).expanduser().resolve()
        updated_config = replace(self._config, data_root=resolved_root)
        return BugdashClient(updated_config, namespace_keys=self._namespace_keys)
