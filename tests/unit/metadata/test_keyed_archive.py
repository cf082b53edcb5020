"""Unit tests for keyed-archive metadata decoding."""

from __future__ import annotations

import plistlib
from datetime import datetime, timezone
from typing import Any

import pytest

from core.errors import (
    ProcreateGraphResolutionError,
    ProcreateMetadataDecodeError,
    ProcreateStructuralParseError,
)
from metadata.keyed_archive import decode_keyed_archive, parse_property_list, resolve_object_graph
from tests.procreate_fixtures import (
    EXPECTED_METADATA,
    document_archive_bytes,
    keyed_archive,
    keyed_archive_bytes,
)


def _class(name: str) -> dict[str, Any]:
    return {"$classname": name, "$classes": [name, "NSObject"]}


def test_decode_keyed_archive_resolves_document_graph() -> None:
    """Decoder should resolve references, classes, and the null sentinel."""
    assert decode_keyed_archive(document_archive_bytes()) == EXPECTED_METADATA


def test_decode_keyed_archive_is_repeatable() -> None:
    """Decoding the same bytes twice should give equal, separate trees."""
    first = decode_keyed_archive(document_archive_bytes())
    second = decode_keyed_archive(document_archive_bytes())

    assert first == second and first is not second


def test_resolve_object_graph_decodes_foundation_classes() -> None:
    """Dictionaries, strings, data, and dates should become plain values."""
    objects: list[Any] = [
        "$null",
        {
            "$class": plistlib.UID(2),
            "NS.keys": [plistlib.UID(3), plistlib.UID(4), plistlib.UID(5)],
            "NS.objects": [plistlib.UID(6), plistlib.UID(8), plistlib.UID(10)],
        },
        _class("NSMutableDictionary"),
        "title",
        "blob",
        "created",
        {"$class": plistlib.UID(7), "NS.string": "Sketch"},
        _class("NSMutableString"),
        {"$class": plistlib.UID(9), "NS.data": b"\x01\x02"},
        _class("NSData"),
        {"$class": plistlib.UID(11), "NS.time": 86400.0},
        _class("NSDate"),
    ]

    value = resolve_object_graph(keyed_archive(objects))

    assert value == {
        "title": "Sketch",
        "blob": b"\x01\x02",
        "created": datetime(2001, 1, 2, tzinfo=timezone.utc),
    }


def test_resolve_object_graph_reuses_shared_references() -> None:
    """An object referenced twice should resolve to equal values in both places."""
    objects: list[Any] = [
        "$null",
        {"$class": plistlib.UID(3), "NS.objects": [plistlib.UID(2), plistlib.UID(2)]},
        "shared",
        _class("NSArray"),
    ]

    assert resolve_object_graph(keyed_archive(objects)) == ["shared", "shared"]


def test_resolve_object_graph_returns_distinct_copies_of_shared_containers() -> None:
    """Mutating one occurrence of a shared container should not change the other."""
    objects: list[Any] = [
        "$null",
        {"$class": plistlib.UID(4), "NS.objects": [plistlib.UID(2), plistlib.UID(2)]},
        {"$class": plistlib.UID(4), "NS.objects": [plistlib.UID(3)]},
        "a",
        _class("NSArray"),
    ]

    value = resolve_object_graph(keyed_archive(objects))
    value[0].append("mutated")

    assert value[0] is not value[1]
    assert value[1] == ["a"]



def test_resolve_object_graph_accepts_single_unnamed_top_entry() -> None:
    """A lone $top entry should serve as the root when 'root' is absent."""
    archive = keyed_archive(["$null", "only"])
    archive["$top"] = {"document": plistlib.UID(1)}

    assert resolve_object_graph(archive) == "only"


@pytest.mark.parametrize(
    "payload",
    [
        b"not a property list",
        b"bplist00\x00\x01truncated",
        b"<?xml version='1.0'?><plist><dict><key>a</key>",
        b"<?xml version='1.0'?><plist version='1.0'><date>garbage</date></plist>",
    ],
)
def test_parse_property_list_raises_structural_parse(payload: bytes) -> None:
    """Malformed plist bytes should fail at the syntax stage."""
    with pytest.raises(ProcreateStructuralParseError):
        parse_property_list(payload)


def test_decode_keyed_archive_raises_graph_resolution_for_plain_plist() -> None:
    """A valid plist without keyed-archive framing should fail at the graph stage."""
    payload = plistlib.dumps({"name": "not an archive"})

    with pytest.raises(ProcreateGraphResolutionError):
        decode_keyed_archive(payload)


def test_decode_failure_kinds_share_base_but_stay_distinct() -> None:
    """Both decode failure kinds should be catchable together yet distinguishable."""
    with pytest.raises(ProcreateMetadataDecodeError) as parse_failure:
        decode_keyed_archive(b"garbage")
    with pytest.raises(ProcreateMetadataDecodeError) as graph_failure:
        decode_keyed_archive(plistlib.dumps([1, 2, 3]))

    assert isinstance(parse_failure.value, ProcreateStructuralParseError)
    assert isinstance(graph_failure.value, ProcreateGraphResolutionError)


@pytest.mark.parametrize(
    "archive",
    [
        keyed_archive(["$null", {"$class": plistlib.UID(2), "NS.objects": [plistlib.UID(99)]}, _class("NSArray")]),
        keyed_archive(["$null"], root_index=5),
        keyed_archive(["$null", {"$class": plistlib.UID(1), "field": 1}]),
        keyed_archive(["$null", {"$class": plistlib.UID(2)}, _class("NSArray")]),
        keyed_archive(["$null", {"$class": plistlib.UID(2), "NS.string": 5}, _class("NSString")]),
        {**keyed_archive(["$null", "x"]), "$archiver": "NSArchiver"},
        {**keyed_archive(["$null", "x"]), "$top": {}},
    ],
    ids=[
        "dangling-object",
        "dangling-root",
        "class-not-descriptor",
        "missing-field",
        "wrong-field-type",
        "wrong-archiver",
        "empty-top",
    ],
)
def test_resolve_object_graph_rejects_inconsistent_archives(archive: dict[str, Any]) -> None:
    """Unresolvable graphs should raise graph resolution errors."""
    with pytest.raises(ProcreateGraphResolutionError):
        resolve_object_graph(archive)


def test_resolve_object_graph_rejects_reference_cycles() -> None:
    """A self-referencing array cannot become a tree."""
    objects: list[Any] = [
        "$null",
        {"$class": plistlib.UID(2), "NS.objects": [plistlib.UID(1)]},
        _class("NSArray"),
    ]

    with pytest.raises(ProcreateGraphResolutionError):
        decode_keyed_archive(keyed_archive_bytes(objects))


def test_resolve_object_graph_rejects_unhashable_dictionary_keys() -> None:
    """Dictionary keys that resolve to lists should be rejected."""
    objects: list[Any] = [
        "$null",
        {"$class": plistlib.UID(2), "NS.keys": [[1]], "NS.objects": ["value"]},
        _class("NSDictionary"),
    ]

    with pytest.raises(ProcreateGraphResolutionError):
        resolve_object_graph(keyed_archive(objects))
