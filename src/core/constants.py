"""Core constants used across Procreate reader modules.

This module centralizes fixed container member names and defaults.
Keeping values here avoids magic literals in reader logic.
"""

from __future__ import annotations

METADATA_MEMBER_NAME = "Document.archive"
THUMBNAIL_MEMBER_NAME = "QuickLook/Thumbnail.png"
TIMELAPSE_SEGMENT_PREFIX = "video/segments/"
SEGMENT_KEY_SEPARATOR = "-"
SEGMENT_EXTENSION_SEPARATOR = "."
DEFAULT_MAX_MEMBER_BYTES = 1024 * 1024 * 1024
DEFAULT_LOG_LEVEL = "WARNING"
SUPPORTED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
KEYED_ARCHIVER_NAME = "NSKeyedArchiver"
KEYED_ARCHIVE_NULL = "$null"
KEYED_ARCHIVE_ROOT_KEY = "root"
EXPORTED_SEGMENT_FILE_TEMPLATE = "segment-{index:04d}.mp4"
