"""JSON rendering for decoded metadata values."""

from __future__ import annotations

import base64
import json
from datetime import datetime
from typing import Any


def to_json_compatible(value: Any) -> Any:
    """Convert a decoded metadata tree into JSON-serializable values.

    Bytes become base64 text, datetimes ISO-8601 text, and mapping keys
    are coerced to strings.

    Args:
        value: Decoded metadata value.

    Returns:
        Equivalent tree of JSON-native types.
    """
    if isinstance(value, dict):
        return {str(key): to_json_compatible(item) for key, item in value.items()}
    if isinstance(value, list):
        return [to_json_compatible(item) for item in value]
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def render_metadata_json(value: Any, indent: int | None = 2) -> str:
    """Render decoded metadata as a JSON document string."""
    return json.dumps(to_json_compatible(value), indent=indent, sort_keys=True)
