"""Contains classes and functions used across all other packages."""

from __future__ import annotations

# Standard Library Imports
from datetime import datetime, timezone


def pathSafeTime(dt: datetime | None = None) -> str:
    """Return a path-safe string representation of `dt`.

    Args:
        dt: The date and time to generate a path-safe time stamp from.

    Returns:
        A path-safe string representation of `dt`.
    """
    if dt is None:
        dt = datetime.now()
    return dt.isoformat().replace(":", "-").replace(".", "")


def toNaiveUTC(dt: datetime) -> datetime:
    """Convert a timezone-aware `dt` to naive UTC. Naive datetimes are returned unchanged."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def formatEpoch(dt: datetime) -> str:
    """Return the ISO-8601 UTC representation of `dt`, with millisecond precision.

    Naive datetimes are assumed to already be expressed in UTC.

    Examples:
        >>> formatEpoch(datetime(2016, 2, 13, 16, 0, 0, 123456))
        '2016-02-13T16:00:00.123Z'

    Args:
        dt: epoch to format.

    Returns:
        ``str``: formatted epoch, suffixed by ``Z``.
    """
    return toNaiveUTC(dt).isoformat(timespec="milliseconds") + "Z"
