"""Public SDK surface for the Procreate reader.

This module provides a stable import path for library users.
It re-exports the document handle, config, and error types.
"""

from __future__ import annotations

from core.config import ProcreateConfig
from core.errors import (
    ProcreateClosedError,
    ProcreateConfigError,
    ProcreateContainerFormatError,
    ProcreateError,
    ProcreateFileOpenError,
    ProcreateGraphResolutionError,
    ProcreateMemberNotFoundError,
    ProcreateMetadataDecodeError,
    ProcreateSegmentNameFormatError,
    ProcreateStructuralParseError,
)
from core.types import DocumentSummary
from document.procreate_document import ProcreateDocument
from metadata.keyed_archive import decode_keyed_archive

__all__ = [
    "DocumentSummary",
    "ProcreateClosedError",
    "ProcreateConfig",
    "ProcreateConfigError",
    "ProcreateContainerFormatError",
    "ProcreateDocument",
    "ProcreateError",
    "ProcreateFileOpenError",
    "ProcreateGraphResolutionError",
    "ProcreateMemberNotFoundError",
    "ProcreateMetadataDecodeError",
    "ProcreateSegmentNameFormatError",
    "ProcreateStructuralParseError",
    "decode_keyed_archive",
    "open_document",
]


def open_document(path: str, config: ProcreateConfig | None = None) -> ProcreateDocument:
    """Open a Procreate document; shorthand for :meth:`ProcreateDocument.open`."""
    return ProcreateDocument.open(path, config)
