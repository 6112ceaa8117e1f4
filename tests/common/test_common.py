from __future__ import annotations

# Standard Library Imports
from datetime import datetime, timedelta, timezone

# Third Party Imports
import pytest

# odresiduals Imports
from odresiduals.common import formatEpoch, pathSafeTime, toNaiveUTC


@pytest.mark.parametrize(
    ("epoch", "expected"),
    [
        (datetime(2016, 2, 13, 16), "2016-02-13T16:00:00.000Z"),
        (datetime(2016, 2, 13, 16, 0, 0, 123456), "2016-02-13T16:00:00.123Z"),
        (datetime(2016, 2, 13, 18, 30, tzinfo=timezone(timedelta(hours=2))), "2016-02-13T16:30:00.000Z"),
        (datetime(2016, 2, 13, 16, tzinfo=timezone.utc), "2016-02-13T16:00:00.000Z"),
    ],
)
def testFormatEpoch(epoch: datetime, expected: str):
    """Test epochs are rendered in UTC with millisecond precision."""
    assert formatEpoch(epoch) == expected


def testPathSafeTime():
    """Test time stamps can be used in file names."""
    stamp = pathSafeTime(datetime(2016, 2, 13, 16, 5, 7, 250))
    assert stamp == "2016-02-13T16-05-07000250"
    assert ":" not in pathSafeTime()


def testToNaiveUTC():
    """Test aware datetimes are converted to naive UTC, and naive ones are kept."""
    naive = datetime(2016, 2, 13, 16)
    assert toNaiveUTC(naive) is naive
    converted = toNaiveUTC(datetime(2016, 2, 13, 18, tzinfo=timezone(timedelta(hours=2))))
    assert converted == naive
    assert converted.tzinfo is None
