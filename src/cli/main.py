"""Procreate reader CLI entry points.
This module exposes commands for inspecting and extracting documents.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Sequence

from cli.export_command import (
    add_thumbnail_command,
    add_timelapse_command,
    run_thumbnail_command,
    run_timelapse_command,
)
from core.config import ProcreateConfig
from core.errors import ProcreateError
from core.logging_config import configure_logging
from document.procreate_document import ProcreateDocument
from metadata.json_export import render_metadata_json


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="procreate", description="Procreate document reader")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_info_command(subparsers)
    _add_metadata_command(subparsers)
    add_thumbnail_command(subparsers)
    add_timelapse_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Procreate reader CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = ProcreateConfig.from_env()
        configure_logging(config.log_level)
        with ProcreateDocument.open(args.file, config) as document:
            return _dispatch(parser, document, args)
    except ProcreateError as error:
        print(f"error={error}", file=sys.stderr)
        return 1


def _dispatch(
    parser: argparse.ArgumentParser,
    document: ProcreateDocument,
    args: argparse.Namespace,
) -> int:
    """Route parsed args to a command handler."""
    if args.command == "info":
        return _run_info_command(document)
    if args.command == "metadata":
        return _run_metadata_command(document, args)
    if args.command == "thumbnail":
        return run_thumbnail_command(document, args)
    if args.command == "timelapse":
        return run_timelapse_command(document, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _run_info_command(document: ProcreateDocument) -> int:
    """Handle info command.

    Args:
        document: Open document handle.

    Returns:
        Exit code.
    """
    summary = document.summary()
    print(f"path={summary.path}")
    print(f"members={summary.member_count}")
    print(f"metadata={'yes' if summary.has_metadata else 'no'}")
    print(f"thumbnail={'yes' if summary.has_thumbnail else 'no'}")
    print(f"segments={summary.segment_count}")
    print(f"total_bytes={summary.total_bytes}")
    print(f"compressed_bytes={summary.compressed_bytes}")
    return 0


def _run_metadata_command(document: ProcreateDocument, args: argparse.Namespace) -> int:
    """Handle metadata command.

    Args:
        document: Open document handle.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    indent = args.indent if args.indent > 0 else None
    print(render_metadata_json(document.metadata(), indent=indent))
    return 0


def _add_info_command(subparsers: Any) -> None:
    """Register info subcommand."""
    parser = subparsers.add_parser("info", help="Summarize document container contents")
    parser.add_argument("file", help="Path to a .procreate document")


def _add_metadata_command(subparsers: Any) -> None:
    """Register metadata subcommand."""
    parser = subparsers.add_parser("metadata", help="Print decoded document metadata as JSON")
    parser.add_argument("file", help="Path to a .procreate document")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent, 0 for compact output")
