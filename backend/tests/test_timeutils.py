from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from core.timeutils import local_day_bounds, parse_datetime, to_local, to_utc

BEIRUT = ZoneInfo("Asia/Beirut")


def test_naive_string_is_local():
    parsed = parse_datetime("2024-03-15T19:30:00")
    assert parsed.tzinfo is not None
    assert to_utc(parsed) == datetime(2024, 3, 15, 17, 30, tzinfo=timezone.utc)


def test_zulu_and_offsets_are_kept():
    assert to_utc(parse_datetime("2024-03-15T19:30:00Z")).hour == 19
    assert to_utc(parse_datetime("2024-03-15T19:30:00+01:00")).hour == 18


def test_date_only_is_local_midnight():
    parsed = parse_datetime("2024-07-01")
    assert (parsed.hour, parsed.minute) == (0, 0)
    # Summer time, UTC+3
    assert to_utc(parsed) == datetime(2024, 6, 30, 21, 0, tzinfo=timezone.utc)


def test_explicit_zone():
    parsed = parse_datetime("2024-03-15T19:30:00", tz=ZoneInfo("UTC"))
    assert to_utc(parsed).hour == 19


@pytest.mark.parametrize("value", ["", "   ", "tomorrow", "15/03/2024"])
def test_bad_strings(value):
    with pytest.raises(ValueError):
        parse_datetime(value)


def test_naive_values_are_treated_as_utc():
    assert to_utc(datetime(2024, 3, 15, 17, 30)) == datetime(2024, 3, 15, 17, 30, tzinfo=timezone.utc)
    assert to_local(datetime(2024, 3, 15, 17, 30)).hour == 19


def test_local_day_bounds():
    start, end = local_day_bounds(date(2024, 3, 15))
    assert start == datetime(2024, 3, 14, 22, 0, tzinfo=timezone.utc)
    assert end == datetime(2024, 3, 15, 22, 0, tzinfo=timezone.utc)


def test_local_day_bounds_across_dst_change():
    # Clocks go forward on the last Sunday of March
    start, end = local_day_bounds(date(2024, 3, 31), tz=BEIRUT)
    assert (end - start).total_seconds() == 23 * 3600
