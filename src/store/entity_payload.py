"""Shared JSON serialization for stored entities.

This module centralizes Bug, Build, and Crash payload conversion.
It is reused by the bug store, resolver, and crash persistence flows.
"""

from __future__ import annotations

import base64
from datetime import datetime
from typing import Any

from core.constants import NO_TEXT_ID
from core.errors import BugdashStoreError
from core.types import Bug, BugStatus, Build, Crash, ReproLevel


def bug_to_payload(bug: Bug) -> dict[str, object]:
    """Serialize a Bug into a JSON-safe payload.

    Args:
        bug: Bug instance.

    Returns:
        Dictionary payload for the key-value store.
    """
    return {
        "namespace": bug.namespace,
        "seq": bug.seq,
        "title": bug.title,
        "status": int(bug.status),
        "dup_of": bug.dup_of,
        "num_crashes": bug.num_crashes,
        "num_repro": bug.num_repro,
        "repro_level": int(bug.repro_level),
        "has_report": bug.has_report,
        "first_time": _time_to_payload(bug.first_time),
        "last_time": _time_to_payload(bug.last_time),
        "closed": _time_to_payload(bug.closed),
        "commits": list(bug.commits),
    }


def bug_from_payload(payload: dict[str, Any]) -> Bug:
    """Deserialize a stored payload into a Bug.

    Raises:
        BugdashStoreError: If the payload misses fields or holds invalid values.
    """
    try:
        return Bug(
            namespace=str(payload["namespace"]),
            title=str(payload["title"]),
            seq=int(payload["seq"]),
            status=BugStatus(int(payload["status"])),
            dup_of=str(payload.get("dup_of", "")),
            num_crashes=int(payload.get("num_crashes", 0)),
            num_repro=int(payload.get("num_repro", 0)),
            repro_level=ReproLevel(int(payload.get("repro_level", 0))),
            has_report=bool(payload.get("has_report", False)),
            first_time=_time_from_payload(payload.get("first_time")),
            last_time=_time_from_payload(payload.get("last_time")),
            closed=_time_from_payload(payload.get("closed")),
            commits=tuple(str(commit) for commit in payload.get("commits", [])),
        )
    except (KeyError, TypeError, ValueError) as error:
        raise BugdashStoreError(f"Invalid stored bug payload: {error!r}.") from error


def build_to_payload(build: Build) -> dict[str, object]:
    return {
        "namespace": build.namespace,
        "manager": build.manager,
        "build_id": build.build_id,
        "os": build.os,
        "arch": build.arch,
        "vm_arch": build.vm_arch,
        "syzkaller_commit": build.syzkaller_commit,
        "compiler_id": build.compiler_id,
        "kernel_repo": build.kernel_repo,
        "kernel_branch": build.kernel_branch,
        "kernel_commit": build.kernel_commit,
        "kernel_config": build.kernel_config,
    }


def build_from_payload(payload: dict[str, Any]) -> Build:
    """Deserialize a stored payload into a Build.

    Raises:
        BugdashStoreError: If required fields are missing.
    """
    try:
        return Build(
            namespace=str(payload["namespace"]),
            manager=str(payload["manager"]),
            build_id=str(payload["build_id"]),
            os=str(payload.get("os", "")),
            arch=str(payload.get("arch", "")),
            vm_arch=str(payload.get("vm_arch", "")),
            syzkaller_commit=str(payload.get("syzkaller_commit", "")),
            compiler_id=str(payload.get("compiler_id", "")),
            kernel_repo=str(payload.get("kernel_repo", "")),
            kernel_branch=str(payload.get("kernel_branch", "")),
            kernel_commit=str(payload.get("kernel_commit", "")),
            kernel_config=int(payload.get("kernel_config", NO_TEXT_ID)),
        )
    except (KeyError, TypeError, ValueError) as error:
        raise BugdashStoreError(f"Invalid stored build payload: {error!r}.") from error


def crash_to_payload(crash: Crash) -> dict[str, object]:
    return {
        "manager": crash.manager,
        "build_id": crash.build_id,
        "time": _time_to_payload(crash.time),
        "maintainers": list(crash.maintainers),
        "log": crash.log,
        "report": crash.report,
        "repro_opts": base64.b64encode(crash.repro_opts).decode("ascii"),
        "repro_syz": crash.repro_syz,
        "repro_c": crash.repro_c,
        "report_len": crash.report_len,
    }


def crash_from_payload(payload: dict[str, Any]) -> Crash:
    """Deserialize a stored payload into a Crash.

    Raises:
        BugdashStoreError: If required fields are missing or invalid.
    """
    try:
        crash_time = _time_from_payload(payload["time"])
        if crash_time is None:
            raise ValueError("crash time is required")
        return Crash(
            manager=str(payload["manager"]),
            build_id=str(payload["build_id"]),
            time=crash_time,
            maintainers=tuple(str(email) for email in payload.get("maintainers", [])),
            log=int(payload.get("log", NO_TEXT_ID)),
            report=int(payload.get("report", NO_TEXT_ID)),
            repro_opts=base64.b64decode(str(payload.get("repro_opts", ""))),
            repro_syz=int(payload.get("repro_syz", NO_TEXT_ID)),
            repro_c=int(payload.get("repro_c", NO_TEXT_ID)),
            report_len=int(payload.get("report_len", 0)),
        )
    except (KeyError, TypeError, ValueError) as error:
        raise BugdashStoreError(f"Invalid stored crash payload: {error!r}.") from error


def _time_to_payload(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _time_from_payload(value: object) -> datetime | None:
    if value is None:
        return None
    return datetime.fromisoformat(str(value))
