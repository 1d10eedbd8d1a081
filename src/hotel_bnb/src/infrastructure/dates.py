"""Date normalization helpers.

MongoDB stores datetimes as naive UTC with millisecond precision, so every
check-in/check-out value is brought to that shape before it is compared with
stored reservations or used to compute a price.
"""

import datetime
from typing import Union

from dateutil import parser, tz

DateLike = Union[str, datetime.date, datetime.datetime]

ONE_DAY = datetime.timedelta(days=1)


def as_datetime(value: DateLike) -> datetime.datetime:
    """Return value as a naive UTC datetime.

    Accepts datetimes, plain dates (taken at midnight) and text in any format
    dateutil understands (e.g. '2024-06-10' or '2024-06-10T14:00:00+03:00').
    """
    if isinstance(value, str):
        value = parser.parse(value)

    if not isinstance(value, datetime.datetime):
        value = datetime.datetime.combine(value, datetime.time.min)

    if value.tzinfo is not None:
        value = value.astimezone(tz.UTC).replace(tzinfo=None)

    # Match what a round trip through the database would give back.
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def start_of_day(value: DateLike) -> datetime.datetime:
    return as_datetime(value).replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(value: DateLike) -> datetime.datetime:
    return start_of_day(value) + ONE_DAY - datetime.timedelta(milliseconds=1)


def utc_now() -> datetime.datetime:
    """Current time as a naive UTC datetime, usable as a DateTimeField default."""
    return as_datetime(datetime.datetime.now(datetime.timezone.utc))
