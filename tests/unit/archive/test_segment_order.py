"""Unit tests for timelapse segment ordering."""

from __future__ import annotations

from pathlib import Path

import pytest

from archive.member_locator import ArchiveMemberLocator
from archive.segment_order import order_segment_names, parse_ordering_key, read_ordered_segments
from core.constants import DEFAULT_MAX_MEMBER_BYTES
from core.errors import ProcreateContainerFormatError, ProcreateSegmentNameFormatError
from tests.procreate_fixtures import corrupt_member_stream, segment_payload, write_container


@pytest.mark.parametrize(
    ("member_name", "expected_key"),
    [
        ("video/segments/segment-12.mp4", 12),
        ("video/segments/segment-007.mp4", 7),
        ("video/segments/my-long-clip-3.mp4", 3),
        ("video/segments/segment-4", 4),
        ("video/segments/segment-5.part.mp4", 5),
    ],
)
def test_parse_ordering_key_reads_last_hyphen_token(member_name: str, expected_key: int) -> None:
    """Key should come from the last hyphen token before its first dot."""
    assert parse_ordering_key(member_name) == expected_key


@pytest.mark.parametrize(
    "member_name",
    [
        "video/segments/clip-abc.mp4",
        "video/segments/clip-.mp4",
        "video/segments/clip-+3.mp4",
        "video/segments/clip- 3.mp4",
        "video/segments/clip-٣.mp4",
        "video/segments/segment.mp4",
    ],
)
def test_parse_ordering_key_rejects_non_numeric_tokens(member_name: str) -> None:
    """Names without an unsigned decimal key should be a format error."""
    with pytest.raises(ProcreateSegmentNameFormatError):
        parse_ordering_key(member_name)


def test_order_segment_names_sorts_numerically_not_lexically() -> None:
    """Ordering should compare integer keys rather than name text."""
    names = [
        "video/segments/clip-0.mp4",
        "video/segments/clip-10.mp4",
        "Document.archive",
        "video/segments/clip-2.mp4",
    ]

    ordered = order_segment_names(names)

    assert [segment.member_name for segment in ordered] == [
        "video/segments/clip-0.mp4",
        "video/segments/clip-2.mp4",
        "video/segments/clip-10.mp4",
    ]


def test_order_segment_names_keeps_listing_order_for_equal_keys() -> None:
    """Equal keys should keep the order the container listed them in."""
    names = [
        "video/segments/b-1.mp4",
        "video/segments/a-1.mp4",
        "video/segments/c-0.mp4",
    ]

    ordered = order_segment_names(names)

    assert [segment.member_name for segment in ordered] == [
        "video/segments/c-0.mp4",
        "video/segments/b-1.mp4",
        "video/segments/a-1.mp4",
    ]


def test_order_segment_names_skips_directory_entries_and_other_members() -> None:
    """Only files under the segment prefix should be selected."""
    names = ["video/segments/", "video/other-1.mp4", "QuickLook/Thumbnail.png"]

    assert order_segment_names(names) == []


@pytest.mark.parametrize("bad_position", [0, 1, 2])
def test_order_segment_names_aborts_on_bad_name_anywhere(bad_position: int) -> None:
    """One malformed name should fail the call wherever it appears."""
    names = ["video/segments/clip-0.mp4", "video/segments/clip-1.mp4"]
    names.insert(bad_position, "video/segments/clip-abc.mp4")

    with pytest.raises(ProcreateSegmentNameFormatError):
        order_segment_names(names)


def test_read_ordered_segments_returns_payloads_in_key_order(tmp_path: Path) -> None:
    """Segment bytes should follow key order, not insertion order."""
    names = ["video/segments/clip-0.mp4", "video/segments/clip-10.mp4", "video/segments/clip-2.mp4"]
    path = write_container(tmp_path / "doc.procreate", [(name, segment_payload(name)) for name in names])

    with ArchiveMemberLocator.open(path, DEFAULT_MAX_MEMBER_BYTES) as locator:
        segments = read_ordered_segments(locator)

    assert segments == [segment_payload(names[0]), segment_payload(names[2]), segment_payload(names[1])]


def test_read_ordered_segments_fails_whole_read_on_corrupt_segment(tmp_path: Path) -> None:
    """A corrupt segment should fail the read instead of returning a partial list."""
    names = ["video/segments/clip-0.mp4", "video/segments/clip-1.mp4"]
    path = write_container(tmp_path / "doc.procreate", [(name, segment_payload(name) * 20) for name in names])
    corrupt_member_stream(path, names[1])

    with ArchiveMemberLocator.open(path, DEFAULT_MAX_MEMBER_BYTES) as locator:
        with pytest.raises(ProcreateContainerFormatError):
            read_ordered_segments(locator)
