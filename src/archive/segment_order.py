"""Timelapse segment ordering.

This module rebuilds the recorded timelapse order from member names.
Names carry an integer key after their last hyphen, e.g. ``clip-12.mp4``.
A name without a parseable key aborts the whole read so no frames
are silently dropped.
"""

from __future__ import annotations

from typing import Iterable

from archive.member_locator import ArchiveMemberLocator
from core.constants import (
    SEGMENT_EXTENSION_SEPARATOR,
    SEGMENT_KEY_SEPARATOR,
    TIMELAPSE_SEGMENT_PREFIX,
)
from core.errors import ProcreateSegmentNameFormatError
from core.logging_config import get_logger
from core.types import SegmentName

_LOGGER = get_logger(__name__)


def parse_ordering_key(member_name: str) -> int:
    """Extract the unsigned ordering key from a segment member name.

    Args:
        member_name: Full member name, e.g. ``video/segments/segment-3.mp4``.

    Returns:
        Parsed non-negative integer key.

    Raises:
        ProcreateSegmentNameFormatError: If the key token is not a base-10
            unsigned integer.
    """
    last_token = member_name.split(SEGMENT_KEY_SEPARATOR)[-1]
    key_token = last_token.split(SEGMENT_EXTENSION_SEPARATOR)[0]
    if not (key_token.isascii() and key_token.isdigit()):
        raise ProcreateSegmentNameFormatError(
            f"Invalid timelapse segment name '{member_name}': "
            f"expected an unsigned integer before the extension, got '{key_token}'. "
            "The document's timelapse entries are malformed."
        )
    return int(key_token)


def order_segment_names(
    member_names: Iterable[str],
    prefix: str = TIMELAPSE_SEGMENT_PREFIX,
) -> list[SegmentName]:
    """Select segment members and sort them by ordering key.

    Every key is parsed before sorting. Equal keys keep listing order.

    Args:
        member_names: Container member names in listing order.
        prefix: Directory prefix designating timelapse segments.

    Returns:
        Segment names sorted ascending by key.

    Raises:
        ProcreateSegmentNameFormatError: If any selected name has no valid key.
    """
    segments = [
        SegmentName(member_name=name, ordering_key=parse_ordering_key(name))
        for name in member_names
        if _is_segment_member(name, prefix)
    ]
    return sorted(segments, key=lambda segment: segment.ordering_key)


def read_ordered_segments(locator: ArchiveMemberLocator) -> list[bytes]:
    """Read all timelapse segments in playback order.

    Args:
        locator: Open container locator.

    Returns:
        Segment payloads, empty when the document has no timelapse.

    Raises:
        ProcreateSegmentNameFormatError: If a segment name has no valid key.
        ProcreateContainerFormatError: If a segment stream is corrupt.
    """
    ordered = order_segment_names(locator.list_names())
    _LOGGER.debug(
        "timelapse_segments_ordered",
        segment_count=len(ordered),
        member_names=[segment.member_name for segment in ordered],
    )
    return [locator.read(segment.member_name) for segment in ordered]


def _is_segment_member(name: str, prefix: str) -> bool:
    """Return whether a member name is a segment file under the prefix."""
    return name.startswith(prefix) and not name.endswith("/")
