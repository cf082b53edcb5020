"""Keyed-archive metadata decoding.

This module decodes the document's NSKeyedArchiver property list in two
stages: property-list syntax first, then object-graph resolution. Each
stage raises its own error type so callers can tell malformed bytes
apart from a well-formed archive with an unresolvable graph.
"""

from __future__ import annotations

import copy
import plistlib
from datetime import datetime, timedelta, timezone
from typing import Any, Callable
from xml.parsers.expat import ExpatError

from core.constants import KEYED_ARCHIVE_NULL, KEYED_ARCHIVE_ROOT_KEY, KEYED_ARCHIVER_NAME
from core.errors import ProcreateGraphResolutionError, ProcreateStructuralParseError

_APPLE_EPOCH = datetime(2001, 1, 1, tzinfo=timezone.utc)
_ARRAY_CLASSES = frozenset(
    {"NSArray", "NSMutableArray", "NSSet", "NSMutableSet", "NSOrderedSet", "NSMutableOrderedSet"}
)
_DICTIONARY_CLASSES = frozenset({"NSDictionary", "NSMutableDictionary"})
_STRING_CLASSES = frozenset({"NSString", "NSMutableString"})
_DATA_CLASSES = frozenset({"NSData", "NSMutableData"})
_DATE_CLASSES = frozenset({"NSDate"})


def decode_keyed_archive(payload: bytes) -> Any:
    """Decode keyed-archive bytes into a plain value tree.

    Args:
        payload: Raw metadata member bytes.

    Returns:
        Resolved root value built from dicts, lists and scalars.

    Raises:
        ProcreateStructuralParseError: If bytes are not a property list.
        ProcreateGraphResolutionError: If the object graph cannot be resolved.
    """
    return resolve_object_graph(parse_property_list(payload))


def parse_property_list(payload: bytes) -> Any:
    """Parse binary or XML property-list bytes.

    Args:
        payload: Raw property-list bytes.

    Returns:
        Parsed property-list value with ``plistlib.UID`` references intact.

    Raises:
        ProcreateStructuralParseError: If the bytes are not valid plist syntax.
    """
    try:
        return plistlib.loads(payload)
    except (plistlib.InvalidFileException, ExpatError, ValueError, AttributeError) as error:
        raise ProcreateStructuralParseError(
            f"Failed to parse document metadata property list: {error}. "
            "The metadata member is not a valid binary or XML plist."
        ) from error


def resolve_object_graph(archive: Any) -> Any:
    """Resolve a parsed keyed archive into a value tree.

    Args:
        archive: Parsed top-level property-list value.

    Returns:
        Resolved root object.

    Raises:
        ProcreateGraphResolutionError: If archive framing is missing or any
            reference dangles, cycles, or points at an invalid class record.
    """
    objects, root_reference = _archive_frame(archive)
    try:
        return _GraphResolver(objects).resolve(root_reference)
    except RecursionError as error:
        raise _graph_error("object graph nests too deeply") from error


def _archive_frame(archive: Any) -> tuple[list[Any], plistlib.UID]:
    """Validate archive framing and return the object table and root reference."""
    if not isinstance(archive, dict):
        raise _graph_error(f"expected a dictionary at top level, got {type(archive).__name__}")
    archiver = archive.get("$archiver")
    if archiver != KEYED_ARCHIVER_NAME:
        raise _graph_error(f"unsupported $archiver {archiver!r}")
    objects = archive.get("$objects")
    if not isinstance(objects, list):
        raise _graph_error("missing $objects table")
    top = archive.get("$top")
    if not isinstance(top, dict) or not top:
        raise _graph_error("missing $top entry")
    if KEYED_ARCHIVE_ROOT_KEY in top:
        root_reference = top[KEYED_ARCHIVE_ROOT_KEY]
    elif len(top) == 1:
        root_reference = next(iter(top.values()))
    else:
        raise _graph_error(f"$top has no '{KEYED_ARCHIVE_ROOT_KEY}' entry")
    if not isinstance(root_reference, plistlib.UID):
        raise _graph_error("$top root is not an object reference")
    return objects, root_reference


class _GraphResolver:
    """Resolve object-table references for one archive."""

    def __init__(self, objects: list[Any]) -> None:
        self._objects = objects
        self._resolved: dict[int, Any] = {}
        self._in_progress: set[int] = set()

    def resolve(self, value: Any) -> Any:
        """Resolve any property-list value, following references."""
        if isinstance(value, plistlib.UID):
            return self._resolve_reference(value.data)
        if isinstance(value, list):
            return [self.resolve(item) for item in value]
        if isinstance(value, dict):
            return self._resolve_dictionary(value)
        return value

    def _resolve_reference(self, index: int) -> Any:
        if index in self._resolved:
            return copy.deepcopy(self._resolved[index])
        if not 0 <= index < len(self._objects):
            raise _graph_error(
                f"dangling reference to object {index}; table has {len(self._objects)} entries"
            )
        if index in self._in_progress:
            raise _graph_error(f"reference cycle through object {index}")
        if self._objects[index] == KEYED_ARCHIVE_NULL:
            return None
        self._in_progress.add(index)
        try:
            value = self.resolve(self._objects[index])
        finally:
            self._in_progress.discard(index)
        self._resolved[index] = value
        return value

    def _resolve_dictionary(self, record: dict[str, Any]) -> Any:
        if "$class" not in record:
            return {key: self.resolve(item) for key, item in record.items()}
        class_name = self._class_name(record["$class"])
        decoder = _CLASS_DECODERS.get(class_name)
        if decoder is not None:
            return decoder(self, record, class_name)
        fields = {key: self.resolve(item) for key, item in record.items() if key != "$class"}
        fields["$classname"] = class_name
        return fields

    def _class_name(self, reference: Any) -> str:
        if not isinstance(reference, plistlib.UID):
            raise _graph_error("$class entry is not an object reference")
        index = reference.data
        if not 0 <= index < len(self._objects):
            raise _graph_error(f"dangling class reference to object {index}")
        descriptor = self._objects[index]
        if not isinstance(descriptor, dict) or not isinstance(descriptor.get("$classname"), str):
            raise _graph_error(f"object {index} is not a class descriptor")
        return descriptor["$classname"]

    def field(self, record: dict[str, Any], key: str, class_name: str) -> Any:
        """Return a required record field, resolved."""
        if key not in record:
            raise _graph_error(f"{class_name} record has no '{key}' field")
        return self.resolve(record[key])


def _decode_array(resolver: _GraphResolver, record: dict[str, Any], class_name: str) -> list[Any]:
    items = resolver.field(record, "NS.objects", class_name)
    if not isinstance(items, list):
        raise _graph_error(f"{class_name} NS.objects is not a list")
    return items


def _decode_dictionary(
    resolver: _GraphResolver,
    record: dict[str, Any],
    class_name: str,
) -> dict[Any, Any]:
    keys = resolver.field(record, "NS.keys", class_name)
    values = resolver.field(record, "NS.objects", class_name)
    if not isinstance(keys, list) or not isinstance(values, list) or len(keys) != len(values):
        raise _graph_error(f"{class_name} keys and objects do not pair up")
    try:
        return dict(zip(keys, values))
    except TypeError as error:
        raise _graph_error(f"{class_name} has an unhashable key: {error}") from error


def _decode_string(resolver: _GraphResolver, record: dict[str, Any], class_name: str) -> str:
    text = resolver.field(record, "NS.string", class_name)
    if not isinstance(text, str):
        raise _graph_error(f"{class_name} NS.string is not text")
    return text


def _decode_data(resolver: _GraphResolver, record: dict[str, Any], class_name: str) -> bytes:
    data = resolver.field(record, "NS.data", class_name)
    if not isinstance(data, bytes):
        raise _graph_error(f"{class_name} NS.data is not binary data")
    return data


def _decode_date(resolver: _GraphResolver, record: dict[str, Any], class_name: str) -> datetime:
    seconds = resolver.field(record, "NS.time", class_name)
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        raise _graph_error(f"{class_name} NS.time is not a number")
    try:
        return _APPLE_EPOCH + timedelta(seconds=seconds)
    except (OverflowError, ValueError) as error:
        raise _graph_error(f"{class_name} NS.time {seconds} is out of range") from error


_CLASS_DECODERS: dict[str, Callable[[_GraphResolver, dict[str, Any], str], Any]] = {
    **{name: _decode_array for name in _ARRAY_CLASSES},
    **{name: _decode_dictionary for name in _DICTIONARY_CLASSES},
    **{name: _decode_string for name in _STRING_CLASSES},
    **{name: _decode_data for name in _DATA_CLASSES},
    **{name: _decode_date for name in _DATE_CLASSES},
}


def _graph_error(detail: str) -> ProcreateGraphResolutionError:
    """Build a graph resolution error with a consistent message."""
    return ProcreateGraphResolutionError(
        f"Failed to resolve document metadata object graph: {detail}. "
        "The metadata archive is internally inconsistent."
    )
