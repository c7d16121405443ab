"""Bugdash CLI entry points.
This module exposes commands for bug identity and text blob operations.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import BugdashConfig
from core.constants import TEXT_TAG_CRASH_LOG, TEXT_TAGS
from core.errors import BugdashError
from identity.title_codec import format_display_title, parse_display_title
from store.dashboard_sdk import BugdashClient
from store.text_store import text_link


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="bugdash", description="Bug identity and dedup CLI")
    parser.add_argument("--data-root", help="Override BUGDASH_DATA_ROOT for this command")
    parser.add_argument(
        "--namespaces-file",
        help="Override BUGDASH_NAMESPACES_FILE for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_title_commands(subparsers)
    _add_bug_commands(subparsers)
    _add_text_commands(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the bugdash CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        if args.command == "title-format":
            print(format_display_title(args.title, args.seq))
            return 0
        if args.command == "title-parse":
            title, seq = parse_display_title(args.display)
            print(f"title={title}")
            print(f"seq={seq}")
            return 0
        client = _build_client(args.data_root, args.namespaces_file)
        if args.command == "bug-create":
            return _run_bug_create_command(client, args)
        if args.command == "bug-dup":
            return _run_bug_dup_command(client, args)
        if args.command == "bug-resolve":
            return _run_bug_resolve_command(client, args)
        if args.command == "text-put":
            return _run_text_put_command(client, args)
        if args.command == "text-get":
            return _run_text_get_command(client, args)
    except BugdashError as error:
        print(f"error={error}")
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(data_root: str | None, namespaces_file: str | None) -> BugdashClient:
    """Build SDK client with optional config overrides."""
    config = BugdashConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    if namespaces_file:
        config = replace(config, namespaces_path=Path(namespaces_file).expanduser().resolve())
    return BugdashClient(config)


def _run_bug_create_command(client: BugdashClient, args: argparse.Namespace) -> int:
    bug = client.bugs.create_bug(args.namespace, args.title)
    print(f"display_title={bug.display_title}")
    print(f"key={client.bugs.bug_key(bug)}")
    return 0


def _run_bug_dup_command(client: BugdashClient, args: argparse.Namespace) -> int:
    bug = client.bugs.load_bug_by_display_title(args.namespace, args.display)
    target = client.bugs.load_bug_by_display_title(args.namespace, args.of)
    duplicate = client.bugs.mark_duplicate(bug, target)
    print(f"dup_of={duplicate.dup_of}")
    return 0


def _run_bug_resolve_command(client: BugdashClient, args: argparse.Namespace) -> int:
    canonical = client.canonical_bug_by_display_title(args.namespace, args.display)
    print(f"display_title={canonical.display_title}")
    print(f"key={client.bugs.bug_key(canonical)}")
    print(f"status={canonical.status.name.lower()}")
    return 0


def _run_text_put_command(client: BugdashClient, args: argparse.Namespace) -> int:
    content = Path(args.file).read_bytes() if args.file != "-" else sys.stdin.buffer.read()
    max_length = args.max_length or client.config.max_log_len
    stored = client.texts.put_text(args.namespace, content, max_length=max_length)
    print(f"id={stored.text_id}")
    print(f"link={text_link(args.tag, stored.text_id) or '-'}")
    print(f"raw_length={stored.raw_length}")
    print(f"stored_length={stored.stored_length}")
    return 0


def _run_text_get_command(client: BugdashClient, args: argparse.Namespace) -> int:
    content = client.texts.get(args.namespace, args.id)
    sys.stdout.flush()
    sys.stdout.buffer.write(content)
    sys.stdout.buffer.flush()
    return 0


def _add_title_commands(subparsers: Any) -> None:
    """Register display title subcommands."""
    format_parser = subparsers.add_parser("title-format", help="Render a display title")
    format_parser.add_argument("title", help="Stored bug title")
    format_parser.add_argument("--seq", type=int, default=0, help="Zero-based sequence")
    parse_parser = subparsers.add_parser("title-parse", help="Split a display title")
    parse_parser.add_argument("display", help="Display title, e.g. 'foo (2)'")


def _add_bug_commands(subparsers: Any) -> None:
    """Register bug subcommands."""
    create_parser = subparsers.add_parser("bug-create", help="Create a bug with the next sequence")
    create_parser.add_argument("--namespace", required=True, help="Bug namespace")
    create_parser.add_argument("--title", required=True, help="Stored bug title")
    dup_parser = subparsers.add_parser("bug-dup", help="Mark a bug as a duplicate")
    dup_parser.add_argument("display", help="Display title of the duplicate bug")
    dup_parser.add_argument("--namespace", required=True, help="Bug namespace")
    dup_parser.add_argument("--of", required=True, help="Display title of the duplicated bug")
    resolve_parser = subparsers.add_parser("bug-resolve", help="Print the canonical bug")
    resolve_parser.add_argument("display", help="Display title of the bug")
    resolve_parser.add_argument("--namespace", required=True, help="Bug namespace")


def _add_text_commands(subparsers: Any) -> None:
    """Register text blob subcommands."""
    put_parser = subparsers.add_parser("text-put", help="Store a text blob")
    put_parser.add_argument("file", help="File to store, or - for stdin")
    put_parser.add_argument("--namespace", required=True, help="Owning namespace")
    put_parser.add_argument(
        "--tag",
        default=TEXT_TAG_CRASH_LOG,
        choices=TEXT_TAGS,
        help="Blob kind used in the printed link",
    )
    put_parser.add_argument(
        "--max-length",
        type=_positive_int,
        help="Truncate content to this many bytes (default: BUGDASH_MAX_LOG_LEN)",
    )
    get_parser = subparsers.add_parser("text-get", help="Print a stored text blob")
    get_parser.add_argument("--namespace", required=True, help="Owning namespace")
    get_parser.add_argument("--id", type=int, required=True, help="Blob id")


def _positive_int(raw_value: str) -> int:
    """Parse a positive integer option value."""
    try:
        value = int(raw_value)
    except ValueError as error:
        raise argparse.ArgumentTypeError(f"expected integer, got '{raw_value}'") from error
    if value <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return value
