from datetime import datetime, timedelta, timezone

import pytest

from BackEnd.core.clock import fmt_duration, fmt_hms, from_iso, round_percent, to_iso, whole_seconds


def test_whole_seconds_floors():
    start = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)

    assert whole_seconds(start, start + timedelta(seconds=59, milliseconds=999)) == 59
    assert whole_seconds(start, start - timedelta(milliseconds=500)) == -1


def test_iso_round_trip_drops_microseconds():
    dt = datetime(2026, 10, 19, 12, 30, 15, 123456, tzinfo=timezone.utc)

    assert to_iso(dt) == "2026-10-19T12:30:15+00:00"
    assert from_iso(to_iso(dt)) == dt.replace(microsecond=0)
    assert from_iso("2026-10-19T12:30:15").tzinfo == timezone.utc
    assert from_iso(None) is None
    assert to_iso(None) is None


def test_formatting():
    assert fmt_hms(3725) == "01:02:05"
    assert fmt_duration(3725) == "1h 02m"
    assert fmt_duration(129) == "2m 09s"


@pytest.mark.parametrize("part,total,expected", [
    (0, 0, 0), (0, 3, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (3, 3, 100),
])
def test_round_percent(part, total, expected):
    assert round_percent(part, total) == expected
