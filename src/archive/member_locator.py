"""Archive member lookup and extraction.

This module wraps one open zip reader over a document container.
It separates missing members from corrupt member streams.
"""

from __future__ import annotations

import lzma
import zipfile
import zlib
from pathlib import Path
from typing import BinaryIO

from core.errors import (
    ProcreateClosedError,
    ProcreateContainerFormatError,
    ProcreateFileOpenError,
    ProcreateMemberNotFoundError,
)
from core.types import ArchiveMemberInfo

_STREAM_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    lzma.LZMAError,
    EOFError,
    OSError,
    NotImplementedError,
    RuntimeError,
)


class ArchiveMemberLocator:
    """Random-access reader over a single zip container.

    Reads move the underlying file position, so one locator must not
    serve two reads at the same time.
    """

    def __init__(self, path: Path, handle: BinaryIO, archive: zipfile.ZipFile, max_member_bytes: int) -> None:
        """Wrap an already opened container.

        Args:
            path: Container path used in error messages.
            handle: Open binary file backing the archive.
            archive: Zip reader over ``handle``.
            max_member_bytes: Upper bound on one member's decompressed size.
        """
        self._path = path
        self._handle: BinaryIO | None = handle
        self._archive: zipfile.ZipFile | None = archive
        self._max_member_bytes = max_member_bytes

    @classmethod
    def open(cls, path: Path, max_member_bytes: int) -> "ArchiveMemberLocator":
        """Open a container file and read its central directory.

        Args:
            path: Container file path.
            max_member_bytes: Upper bound on one member's decompressed size.

        Returns:
            Locator owning the open file.

        Raises:
            ProcreateFileOpenError: If the path cannot be opened for reading.
            ProcreateContainerFormatError: If the file is not a valid zip container.
        """
        try:
            handle = path.open("rb")
        except OSError as error:
            raise ProcreateFileOpenError(
                f"Failed to open document at {path}: {error.strerror or error}. "
                "Provide an existing, readable .procreate file."
            ) from error
        try:
            archive = zipfile.ZipFile(handle)
        except (zipfile.BadZipFile, OSError, ValueError) as error:
            handle.close()
            raise ProcreateContainerFormatError(
                f"Failed to read container structure of {path}: {error}. "
                "The file is not a valid zip-based document."
            ) from error
        return cls(path, handle, archive, max_member_bytes)

    @property
    def closed(self) -> bool:
        """Return whether the underlying file has been released."""
        return self._archive is None

    def list_names(self) -> list[str]:
        """Return member names in container listing order."""
        return self._require_archive().namelist()

    def list_members(self) -> list[ArchiveMemberInfo]:
        """Return member listing entries in container listing order."""
        return [
            ArchiveMemberInfo(name=info.filename, file_size=info.file_size, compress_size=info.compress_size)
            for info in self._require_archive().infolist()
        ]

    def contains(self, name: str) -> bool:
        """Return whether a member with this exact name exists."""
        try:
            self._require_archive().getinfo(name)
        except KeyError:
            return False
        return True

    def read(self, name: str) -> bytes:
        """Read one member to exhaustion.

        Args:
            name: Exact member name.

        Returns:
            Complete decompressed member bytes.

        Raises:
            ProcreateMemberNotFoundError: If no member has this name.
            ProcreateContainerFormatError: If the member stream is corrupt
                or larger than the configured limit.
        """
        archive = self._require_archive()
        try:
            info = archive.getinfo(name)
        except KeyError as error:
            raise ProcreateMemberNotFoundError(
                f"Member '{name}' not found in {self._path}. "
                "The document is missing a required entry."
            ) from error
        if info.file_size > self._max_member_bytes:
            raise self._oversize_error(name)
        try:
            with archive.open(info) as stream:
                payload = stream.read(self._max_member_bytes + 1)
                if len(payload) > self._max_member_bytes:
                    raise self._oversize_error(name)
                # drain so the CRC check at end of stream runs
                stream.read()
        except _STREAM_ERRORS as error:
            raise ProcreateContainerFormatError(
                f"Failed to decompress member '{name}' in {self._path}: {error}. "
                "The document container is corrupt or truncated."
            ) from error
        return payload

    def close(self) -> None:
        """Release the zip reader and its file; safe to call twice."""
        if self._archive is not None:
            self._archive.close()
            self._archive = None
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def __enter__(self) -> "ArchiveMemberLocator":
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    def _require_archive(self) -> zipfile.ZipFile:
        """Return the open archive or fail for a closed locator."""
        if self._archive is None:
            raise ProcreateClosedError(
                f"Container {self._path} is closed. Open the document again to read it."
            )
        return self._archive

    def _oversize_error(self, name: str) -> ProcreateContainerFormatError:
        """Build the error for a member over the size limit."""
        return ProcreateContainerFormatError(
            f"Member '{name}' in {self._path} exceeds {self._max_member_bytes} bytes "
            "when decompressed. Raise PROCREATE_MAX_MEMBER_BYTES if the document is trusted."
        )
