"""Time helpers shared by the catalog and the HTTP layer."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any


def utcnow() -> datetime:
    # BSON keeps millisecond precision only; truncate so stored and returned values match
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def _coerce_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value

    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            return None

    return None


def to_iso_utc(ts: Any) -> str | None:
    """Serialize a timestamp-like object to ISO-8601 with a UTC ``Z`` suffix."""
    converted = _coerce_datetime(ts)
    if converted is None:
        return None

    # pymongo hands back naive datetimes that are implicitly UTC
    if converted.tzinfo is None:
        converted = converted.replace(tzinfo=timezone.utc)
    else:
        converted = converted.astimezone(timezone.utc)

    return converted.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def as_aware_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


__all__ = ["as_aware_utc", "to_iso_utc", "utcnow"]
