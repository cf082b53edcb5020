"""Procreate reader exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each failure kind surfaces as its own type so callers can branch on it.
"""

from __future__ import annotations


class ProcreateError(Exception):
    """Base exception for all Procreate reader failures."""


class ProcreateConfigError(ProcreateError):
    """Raised for invalid runtime configuration."""


class ProcreateFileOpenError(ProcreateError):
    """Raised when a document path cannot be opened for reading."""


class ProcreateContainerFormatError(ProcreateError):
    """Raised for invalid zip structure or corrupt member streams."""


class ProcreateMemberNotFoundError(ProcreateError):
    """Raised when an expected archive member is absent."""


class ProcreateSegmentNameFormatError(ProcreateError):
    """Raised when a timelapse member name has no parseable ordering key."""


class ProcreateMetadataDecodeError(ProcreateError):
    """Base for failures while decoding the metadata member."""


class ProcreateStructuralParseError(ProcreateMetadataDecodeError):
    """Raised when metadata bytes are not a valid property list."""


class ProcreateGraphResolutionError(ProcreateMetadataDecodeError):
    """Raised when a parsed keyed archive cannot be resolved to a value tree."""


class ProcreateClosedError(ProcreateError):
    """Raised when a closed document handle is used."""
