"""Playstore CLI entry points.
This module exposes load, lookup, and aggregate commands.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
import sys
from typing import Any, Callable, Sequence

from core.config import PlaystoreConfig
from core.types import LoadOptions, LoadSummary, PlaygroundRecord
from store.dataset_sdk import PlaystoreClient
from store.text_encoder import write_text_records

LOOKUP_BACKENDS = ("binary", "database")


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="playstore", description="Playstore CLI")
    parser.add_argument("--data-root", help="Override PLAYSTORE_DATA_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_load_command(subparsers)
    _add_lookup_command(subparsers)
    subparsers.add_parser("range", help="Print min/max object id of the canonical output")
    subparsers.add_parser("interactive", help="Prompt for a load and an object id lookup")
    return parser


def main(argv: Sequence[str] | None = None, input_func: Callable[[str], str] = input) -> int:
    """Run the Playstore CLI.

    Args:
        argv: Optional argument vector.
        input_func: Prompt reader used by the interactive command.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    client = _build_client(args.data_root)
    if args.command == "load":
        return _run_load_command(client, args)
    if args.command == "lookup":
        return _run_lookup_command(client, args)
    if args.command == "range":
        return _run_range_command(client)
    if args.command == "interactive":
        return _run_interactive_command(client, input_func)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(data_root: str | None) -> PlaystoreClient:
    """Build SDK client with optional data-root override."""
    config = PlaystoreConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    return PlaystoreClient(config)


def _run_load_command(client: PlaystoreClient, args: argparse.Namespace) -> int:
    """Handle load command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    options = LoadOptions(
        source_uri=args.source or client.config.source_uri,
        write_database=not args.skip_database,
    )
    _print_load_summary(client.load(options))
    return 0


def _run_lookup_command(client: PlaystoreClient, args: argparse.Namespace) -> int:
    """Handle lookup command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code, 1 when nothing matched.
    """
    if args.backend == "database":
        matches = client.lookup_database(args.object_id)
    else:
        matches = client.lookup(args.object_id)
    _print_records(matches)
    return 0 if matches else 1


def _run_range_command(client: PlaystoreClient) -> int:
    """Handle range command."""
    key_range = client.object_id_range()
    print(f"min objectid: {key_range.minimum}")
    print(f"max objectid: {key_range.maximum}")
    return 0


def _run_interactive_command(client: PlaystoreClient, input_func: Callable[[str], str]) -> int:
    """Handle interactive command.

    Asks whether to run a load cycle (default yes), then looks one object
    id up through the binary index and the database.

    Args:
        client: SDK client.
        input_func: Prompt reader.

    Returns:
        Exit code, 2 for a non-numeric object id.
    """
    answer = input_func("Init? [Y/n] ").strip()
    if not answer or answer.upper() == "Y":
        _print_load_summary(client.load())
    raw_object_id = input_func("Enter an object id: ").strip()
    try:
        object_id = int(raw_object_id)
    except ValueError:
        print(f"Invalid object id: '{raw_object_id}'", file=sys.stderr)
        return 2
    print("binary:")
    _print_records(client.lookup(object_id))
    print("database:")
    _print_records(client.lookup_database(object_id))
    return 0


def _print_load_summary(summary: LoadSummary) -> None:
    print(f"records={summary.record_count}")
    print(f"indexed={summary.indexed_count}")
    if summary.object_id_range is not None:
        print(f"min objectid: {summary.object_id_range.minimum}")
        print(f"max objectid: {summary.object_id_range.maximum}")
    for output_path in summary.output_paths:
        print(output_path)


def _print_records(records: list[PlaygroundRecord]) -> None:
    write_text_records(records, sys.stdout)


def _add_load_command(subparsers: Any) -> None:
    """Register load subcommand."""
    parser = subparsers.add_parser("load", help="Load a source and write every output format")
    parser.add_argument(
        "source",
        nargs="?",
        help="Source file, http(s) URL, or s3://bucket/key (default: PLAYSTORE_SOURCE_URI)",
    )
    parser.add_argument(
        "--skip-database",
        action="store_true",
        help="Do not mirror records into the relational store",
    )


def _add_lookup_command(subparsers: Any) -> None:
    """Register lookup subcommand."""
    parser = subparsers.add_parser("lookup", help="Find records by object id")
    parser.add_argument("object_id", type=int, help="Object id to look up")
    parser.add_argument(
        "--backend",
        default="binary",
        choices=LOOKUP_BACKENDS,
        help="Lookup through the binary index or the database",
    )
