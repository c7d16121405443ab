"""Namespace key material loading.

This module reads the YAML file that maps each namespace to the secret
key mixed into its bug keys. The parsed mapping is handed to the key
deriver explicitly so key derivation never reads global state.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, cast

from core.errors import BugdashConfigError, BugdashDependencyError


def load_namespace_keys(namespaces_path: Path | None) -> dict[str, str]:
    """Load per-namespace key material from a YAML file.

    Expected layout::

        namespaces:
          upstream:
            key: "secret"

    Args:
        namespaces_path: YAML file path, or None for no configured namespaces.

    Returns:
        Mapping of namespace name to key material.

    Raises:
        BugdashDependencyError: If PyYAML is unavailable.
        BugdashConfigError: If the file is missing or malformed.
    """
    if namespaces_path is None:
        return {}
    payload = _load_yaml_payload(namespaces_path)
    root_mapping = _expect_mapping(payload, f"namespaces file {namespaces_path}")
    unknown_keys = sorted(set(root_mapping) - {"namespaces"})
    if unknown_keys:
        raise BugdashConfigError(
            f"Namespaces file {namespaces_path} contains unknown root fields: "
            f"{', '.join(unknown_keys)}."
        )
    raw_namespaces = root_mapping.get("namespaces")
    if raw_namespaces is None:
        raise BugdashConfigError(
            f"Namespaces file {namespaces_path} is missing the 'namespaces' mapping."
        )
    namespaces = _expect_mapping(raw_namespaces, "namespaces")
    return {name: _parse_namespace_key(name, value) for name, value in namespaces.items()}


def _load_yaml_payload(namespaces_path: Path) -> object:
    try:
        import yaml  # type: ignore[import-untyped]
    except ImportError as error:  # pragma: no cover - dependency failure
        raise BugdashDependencyError(
            "Namespace configuration requires PyYAML. Install with 'pip install pyyaml'."
        ) from error
    if not namespaces_path.exists():
        raise BugdashConfigError(
            f"Namespaces file does not exist at {namespaces_path}. "
            "Set BUGDASH_NAMESPACES_FILE to a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(namespaces_path.read_text(encoding="utf-8")))
    except OSError as error:
        raise BugdashConfigError(
            f"Failed to read namespaces file at {namespaces_path}: {error}."
        ) from error
    except yaml.YAMLError as error:
        raise BugdashConfigError(
            f"Failed to parse namespaces file at {namespaces_path}: {error}. Fix YAML syntax."
        ) from error
    if payload is None:
        raise BugdashConfigError(f"Namespaces file at {namespaces_path} is empty.")
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if not isinstance(value, Mapping):
        raise BugdashConfigError(
            f"Invalid {context}: expected object mapping, got {type(value).__name__}."
        )
    for key in value:
        if not isinstance(key, str):
            raise BugdashConfigError(
                f"Invalid {context}: expected string keys, got {type(key).__name__}."
            )
    return cast(Mapping[str, object], value)


def _parse_namespace_key(name: str, value: object) -> str:
    namespace_mapping = _expect_mapping(value, f"namespace '{name}'")
    raw_key = namespace_mapping.get("key")
    if not isinstance(raw_key, str) or not raw_key.strip():
        raise BugdashConfigError(
            f"Namespace '{name}' must define a non-empty string 'key'."
        )
    return raw_key
