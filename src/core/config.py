"""Runtime configuration model for bugdash.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_DATA_ROOT,
    DEFAULT_MAX_DUPLICATE_HOPS,
    DEFAULT_MAX_LOG_LEN,
    MAX_TEXT_LEN,
)
from core.errors import BugdashConfigError


@dataclass(frozen=True)
class BugdashConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for the JSON-file entity store.
        namespaces_path: Optional YAML file with per-namespace key material.
        max_duplicate_hops: Upper bound on duplicate pointers followed per resolve.
        max_log_len: Byte cap applied to crash logs before storage.
        max_text_len: Default byte cap for short text blobs.
    """

    data_root: Path
    namespaces_path: Path | None
    max_duplicate_hops: int
    max_log_len: int
    max_text_len: int

    @classmethod
    def from_env(cls) -> "BugdashConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            BugdashConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("BUGDASH_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        namespaces_value = os.getenv("BUGDASH_NAMESPACES_FILE")
        namespaces_path = (
            Path(namespaces_value).expanduser().resolve() if namespaces_value else None
        )
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            namespaces_path=namespaces_path,
            max_duplicate_hops=_parse_positive_int(
                "BUGDASH_MAX_DUPLICATE_HOPS",
                os.getenv("BUGDASH_MAX_DUPLICATE_HOPS", str(DEFAULT_MAX_DUPLICATE_HOPS)),
            ),
            max_log_len=_parse_positive_int(
                "BUGDASH_MAX_LOG_LEN",
                os.getenv("BUGDASH_MAX_LOG_LEN", str(DEFAULT_MAX_LOG_LEN)),
            ),
            max_text_len=_parse_positive_int(
                "BUGDASH_MAX_TEXT_LEN",
                os.getenv("BUGDASH_MAX_TEXT_LEN", str(MAX_TEXT_LEN)),
            ),
        )


def _parse_positive_int(variable_name: str, raw_value: str) -> int:
    """Parse a positive integer environment value.

    Args:
        variable_name: Environment variable name used in error messages.
        raw_value: Raw string from environment.

    Returns:
        Parsed integer.

    Raises:
        BugdashConfigError: If value is not a positive integer.
    """
    try:
        value = int(raw_value)
    except ValueError as error:
        raise BugdashConfigError(
            f"Invalid {variable_name} value: "
            f"expected integer, got '{raw_value}'. "
            f"Set {variable_name} to a numeric value."
        ) from error
    if value <= 0:
        raise BugdashConfigError(
            f"Invalid {variable_name} value: expected a positive integer, got {value}."
        )
    return value
