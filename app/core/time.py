"""Hora actual en UTC para sellar documentos."""
from __future__ import annotations

from datetime import datetime, timezone


def now_utc() -> datetime:
    """Datetime aware en UTC, truncado a milisegundos (precisión de BSON)."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def as_utc(dt: datetime) -> datetime:
    # Mongo devuelve datetimes naive salvo tz_aware=True
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
