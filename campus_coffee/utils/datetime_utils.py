"""Datetime helpers for API responses.
Serialize API datetimes as UTC with Z so clients interpret as UTC."""
from datetime import datetime, timezone


def serialize_datetime_utc(v: datetime) -> str:
    """Serialize datetime for API JSON: always UTC with Z (ISO 8601)."""
    if v.tzinfo is None:
        return v.isoformat() + "Z"
    return v.astimezone(timezone.utc).replace(tzinfo=None).isoformat() + "Z"
