"""Extraction command wiring for the Procreate reader CLI.

This module isolates thumbnail and timelapse export commands.
It keeps the top-level CLI module focused on inspection commands.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

from core.constants import EXPORTED_SEGMENT_FILE_TEMPLATE
from document.procreate_document import ProcreateDocument


def add_thumbnail_command(subparsers: Any) -> None:
    """Register thumbnail subcommand."""
    parser = subparsers.add_parser("thumbnail", help="Write the document preview image")
    parser.add_argument("file", help="Path to a .procreate document")
    parser.add_argument("--output", required=True, help="Destination image path")


def add_timelapse_command(subparsers: Any) -> None:
    """Register timelapse subcommand."""
    parser = subparsers.add_parser("timelapse", help="Write timelapse segments in playback order")
    parser.add_argument("file", help="Path to a .procreate document")
    parser.add_argument("--output-dir", required=True, help="Destination directory for segments")


def run_thumbnail_command(document: ProcreateDocument, args: argparse.Namespace) -> int:
    """Write preview bytes and print the output path."""
    output_path = Path(args.output).expanduser()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(document.thumbnail())
    print(output_path)
    return 0


def run_timelapse_command(document: ProcreateDocument, args: argparse.Namespace) -> int:
    """Write ordered timelapse segments and print each output path.

    Args:
        document: Open document handle.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    segments = document.timelapse_segments()
    output_dir = Path(args.output_dir).expanduser()
    output_dir.mkdir(parents=True, exist_ok=True)
    for index, payload in enumerate(segments):
        segment_path = output_dir / EXPORTED_SEGMENT_FILE_TEMPLATE.format(index=index)
        segment_path.write_bytes(payload)
        print(segment_path)
    return 0
