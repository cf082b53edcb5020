"""Shared typed models.

This module defines immutable data models passed between the archive,
document, and CLI layers to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ArchiveMemberInfo:
    """Listing entry for one container member.

    Attributes:
        name: Member name, unique within the container.
        file_size: Declared decompressed size in bytes.
        compress_size: Stored compressed size in bytes.
    """

    name: str
    file_size: int
    compress_size: int


@dataclass(frozen=True)
class SegmentName:
    """Timelapse segment member with its parsed ordering key.

    Attributes:
        member_name: Full member name under the segment prefix.
        ordering_key: Unsigned integer parsed from the name.
    """

    member_name: str
    ordering_key: int


@dataclass(frozen=True)
class DocumentSummary:
    """Overview of a document's container contents.

    Attributes:
        path: Resolved document path.
        member_count: Number of container members.
        has_metadata: Whether the metadata member exists.
        has_thumbnail: Whether the preview image member exists.
        segment_count: Number of timelapse segment members.
        total_bytes: Sum of declared decompressed member sizes.
        compressed_bytes: Sum of stored compressed member sizes.
    """

    path: Path
    member_count: int
    has_metadata: bool
    has_thumbnail: bool
    segment_count: int
    total_bytes: int
    compressed_bytes: int
