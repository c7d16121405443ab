"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


NAMESPACE_KEYS = {"upstream": "upstream-secret", "android": "android-secret"}


@pytest.fixture
def namespace_keys() -> dict[str, str]:
    """Key material for the namespaces used across tests."""
    return dict(NAMESPACE_KEYS)


@pytest.fixture
def memory_client(tmp_path, namespace_keys):
    """SDK client backed by an in-memory store."""
    from core.config import BugdashConfig
    from store.dashboard_sdk import BugdashClient
    from store.kv_store import InMemoryKeyValueStore

    config = replace(BugdashConfig.from_env(), data_root=tmp_path)
    return BugdashClient(config, store=InMemoryKeyValueStore(), namespace_keys=namespace_keys)
