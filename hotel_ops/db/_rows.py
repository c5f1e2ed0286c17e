"""Conversion of result rows into plain dicts."""

from datetime import datetime
from typing import Any, Mapping

from hotel_ops.utils.datetime import ensure_utc


def row_to_dict(row: Mapping[str, Any]) -> dict[str, Any]:
    """Copy a mapping row, normalising datetimes to aware UTC."""
    return {
        key: ensure_utc(value) if isinstance(value, datetime) else value
        for key, value in row.items()
    }
