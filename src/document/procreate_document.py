"""Procreate document handle.

This module exposes metadata, thumbnail, and timelapse reads over one
open container. Each handle owns exactly one archive reader and guards
it with a lock; duplicating a handle re-opens the file instead of
sharing that reader.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Callable, TypeVar

from archive.member_locator import ArchiveMemberLocator
from archive.segment_order import order_segment_names, read_ordered_segments
from core.config import ProcreateConfig
from core.constants import METADATA_MEMBER_NAME, THUMBNAIL_MEMBER_NAME
from core.errors import ProcreateClosedError
from core.logging_config import get_logger
from core.types import DocumentSummary
from metadata.keyed_archive import decode_keyed_archive

_LOGGER = get_logger(__name__)

_T = TypeVar("_T")


class ProcreateDocument:
    """Handle over one open ``.procreate`` document.

    Reads from different threads are serialized per handle. Separate
    handles, including duplicates, share no state and may read in parallel.
    """

    def __init__(self, path: Path, locator: ArchiveMemberLocator, config: ProcreateConfig) -> None:
        """Wrap an open locator; use :meth:`open` instead of calling this directly.

        Args:
            path: Resolved document path.
            locator: Locator exclusively owned by this handle.
            config: Runtime configuration used for reads and duplicates.
        """
        self._path = path
        self._locator = locator
        self._config = config
        self._lock = threading.Lock()

    @classmethod
    def open(cls, path: str | Path, config: ProcreateConfig | None = None) -> "ProcreateDocument":
        """Open a document file.

        Args:
            path: Filesystem path to the document.
            config: Optional runtime configuration.

        Returns:
            Open document handle.

        Raises:
            ProcreateFileOpenError: If the path cannot be read.
            ProcreateContainerFormatError: If the file is not a valid container.
        """
        resolved_config = config or ProcreateConfig.from_env()
        resolved_path = Path(path).expanduser().resolve()
        locator = ArchiveMemberLocator.open(resolved_path, resolved_config.max_member_bytes)
        _LOGGER.info("document_opened", path=str(resolved_path))
        return cls(resolved_path, locator, resolved_config)

    @property
    def path(self) -> Path:
        """Return the document path, the handle's durable identity."""
        return self._path

    @property
    def closed(self) -> bool:
        """Return whether the handle has released its file."""
        return self._locator.closed

    def metadata(self) -> Any:
        """Decode the document metadata archive.

        Returns:
            Resolved metadata value tree, owned by the caller.

        Raises:
            ProcreateMemberNotFoundError: If the metadata member is absent.
            ProcreateContainerFormatError: If the member stream is corrupt.
            ProcreateStructuralParseError: If the member is not a property list.
            ProcreateGraphResolutionError: If the object graph cannot be resolved.
        """
        payload = self._with_locator(lambda locator: locator.read(METADATA_MEMBER_NAME))
        value = decode_keyed_archive(payload)
        _LOGGER.debug("metadata_decoded", path=str(self._path), payload_bytes=len(payload))
        return value

    def thumbnail(self) -> bytes:
        """Return the preview image bytes verbatim.

        Raises:
            ProcreateMemberNotFoundError: If the thumbnail member is absent.
            ProcreateContainerFormatError: If the member stream is corrupt.
        """
        return self._with_locator(lambda locator: locator.read(THUMBNAIL_MEMBER_NAME))

    def timelapse_segments(self) -> list[bytes]:
        """Return timelapse video segments in playback order.

        Raises:
            ProcreateSegmentNameFormatError: If a segment name has no ordering key.
            ProcreateContainerFormatError: If a segment stream is corrupt.
        """
        return self._with_locator(read_ordered_segments)

    def member_names(self) -> list[str]:
        """Return container member names in listing order."""
        return self._with_locator(lambda locator: locator.list_names())

    def summary(self) -> DocumentSummary:
        """Summarize which well-known members the container holds.

        Raises:
            ProcreateSegmentNameFormatError: If a segment name has no ordering key.
        """
        return self._with_locator(self._build_summary)

    def duplicate(self) -> "ProcreateDocument":
        """Open an independent handle on the same path.

        Unlike a value copy this can fail, because the file is opened again.

        Returns:
            New handle with its own archive reader.

        Raises:
            ProcreateFileOpenError: If the path is no longer readable.
            ProcreateContainerFormatError: If the file is no longer a valid container.
        """
        return ProcreateDocument.open(self._path, self._config)

    def close(self) -> None:
        """Release the underlying file; safe to call more than once."""
        with self._lock:
            if self._locator.closed:
                return
            self._locator.close()
        _LOGGER.info("document_closed", path=str(self._path))

    def __enter__(self) -> "ProcreateDocument":
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    def __copy__(self) -> "ProcreateDocument":
        raise TypeError("ProcreateDocument cannot be copied; call duplicate() to reopen the file")

    def __deepcopy__(self, memo: dict[int, Any]) -> "ProcreateDocument":
        raise TypeError("ProcreateDocument cannot be copied; call duplicate() to reopen the file")

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"ProcreateDocument(path={str(self._path)!r}, {state})"

    def _with_locator(self, operation: Callable[[ArchiveMemberLocator], _T]) -> _T:
        """Run one operation with exclusive access to the locator."""
        with self._lock:
            if self._locator.closed:
                raise ProcreateClosedError(
                    f"Document {self._path} is closed. Open it again or use duplicate() first."
                )
            return operation(self._locator)

    def _build_summary(self, locator: ArchiveMemberLocator) -> DocumentSummary:
        members = locator.list_members()
        names = [member.name for member in members]
        return DocumentSummary(
            path=self._path,
            member_count=len(names),
            has_metadata=locator.contains(METADATA_MEMBER_NAME),
            has_thumbnail=locator.contains(THUMBNAIL_MEMBER_NAME),
            segment_count=len(order_segment_names(names)),
            total_bytes=sum(member.file_size for member in members),
            compressed_bytes=sum(member.compress_size for member in members),
        )
