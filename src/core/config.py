"""Runtime configuration model for the Procreate reader.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import DEFAULT_LOG_LEVEL, DEFAULT_MAX_MEMBER_BYTES, SUPPORTED_LOG_LEVELS
from core.errors import ProcreateConfigError


@dataclass(frozen=True)
class ProcreateConfig:
    """Validated runtime configuration.

    Attributes:
        max_member_bytes: Upper bound on one member's decompressed size.
        log_level: Minimum structured log level name.
    """

    max_member_bytes: int = DEFAULT_MAX_MEMBER_BYTES
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "ProcreateConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            ProcreateConfigError: If environment values are invalid.
        """
        max_member_value = os.getenv("PROCREATE_MAX_MEMBER_BYTES", str(DEFAULT_MAX_MEMBER_BYTES))
        log_level_value = os.getenv("PROCREATE_LOG_LEVEL", DEFAULT_LOG_LEVEL)
        return cls(
            max_member_bytes=_parse_max_member_bytes(max_member_value),
            log_level=_parse_log_level(log_level_value),
        )


def _parse_max_member_bytes(raw_value: str) -> int:
    """Parse the member size limit environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed positive byte limit.

    Raises:
        ProcreateConfigError: If value is not a positive integer.
    """
    try:
        limit = int(raw_value)
    except ValueError as error:
        raise ProcreateConfigError(
            "Invalid PROCREATE_MAX_MEMBER_BYTES value: "
            f"expected integer, got '{raw_value}'. "
            "Set PROCREATE_MAX_MEMBER_BYTES to a positive byte count."
        ) from error
    if limit <= 0:
        raise ProcreateConfigError(
            f"Invalid PROCREATE_MAX_MEMBER_BYTES value: {limit}. "
            "Set PROCREATE_MAX_MEMBER_BYTES to a positive byte count."
        )
    return limit


def _parse_log_level(raw_value: str) -> str:
    """Parse the log level environment value."""
    level = raw_value.strip().upper()
    if level not in SUPPORTED_LOG_LEVELS:
        raise ProcreateConfigError(
            f"Invalid PROCREATE_LOG_LEVEL value: '{raw_value}'. "
            f"Supported levels: {SUPPORTED_LOG_LEVELS}."
        )
    return level
