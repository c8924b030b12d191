"""
TTL policy: turns an object's absolute expiry into a cache TTL in seconds.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone

from s3ds.types import utc_now


def _as_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _seconds_between(expires: datetime, now: datetime) -> float:
    return (_as_utc(expires) - _as_utc(now)).total_seconds()


def resolve_ttl(
    expires: datetime | None,
    now: datetime,
    default_ttl_seconds: int,
) -> int:
    """Resolve the TTL for a cache entry.

    Args:
        expires: Absolute expiry reported by the store, if any.
        now: Current time.
        default_ttl_seconds: TTL used when there is no expiry.

    Returns:
        Seconds until expiry, rounded half-up to the nearest second,
        never negative.
    """
    if expires is None:
        return default_ttl_seconds

    ttl = math.floor(_seconds_between(expires, now) + 0.5)
    return ttl if ttl > 0 else 0


def expires_to_ttl(expires: datetime, now: datetime | None = None) -> int:
    """TTL for a known expiry; ``now`` defaults to the wall clock."""
    if now is None:
        now = utc_now()
    return resolve_ttl(expires, now, 0)
