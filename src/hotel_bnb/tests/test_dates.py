from datetime import date, datetime, timedelta, timezone

from infrastructure.dates import as_datetime, end_of_day, start_of_day, utc_now


def test_plain_date_is_midnight():
    assert as_datetime(date(2024, 6, 10)) == datetime(2024, 6, 10)


def test_text_is_parsed():
    assert as_datetime("2024-06-10") == datetime(2024, 6, 10)
    assert as_datetime("June 10 2024 14:30") == datetime(2024, 6, 10, 14, 30)


def test_aware_datetime_becomes_naive_utc():
    eat = timezone(timedelta(hours=3))
    value = as_datetime(datetime(2024, 6, 10, 14, 0, tzinfo=eat))

    assert value == datetime(2024, 6, 10, 11, 0)
    assert value.tzinfo is None


def test_microseconds_are_truncated_to_milliseconds():
    assert as_datetime(datetime(2024, 6, 10, 0, 0, 0, 123456)).microsecond == 123000


def test_day_bounds():
    assert start_of_day("2024-06-10T15:45") == datetime(2024, 6, 10)
    assert end_of_day("2024-06-10T15:45") == datetime(2024, 6, 10, 23, 59, 59, 999000)


def test_utc_now_is_naive_utc():
    value = utc_now()
    expected = datetime.now(timezone.utc).replace(tzinfo=None)

    assert value.tzinfo is None
    assert abs(expected - value) < timedelta(seconds=5)
