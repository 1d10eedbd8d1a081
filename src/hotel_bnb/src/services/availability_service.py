import math

from data.reservations import BLOCKING_STATUSES
from infrastructure.dates import ONE_DAY, as_datetime
from services.errors import InvalidRange

"""
Room availability and stay pricing.

Everything here is a pure function of its arguments: nothing is read from or
written to the database, and the room passed in is never modified. A "room"
is anything with is_available, price and reservations attributes, where each
reservation has check_in, check_out, status and booking_id; data.rooms.Room
satisfies that.

Stays are half-open ranges [check_in, check_out): a guest checking out on the
10th does not block another guest checking in on the 10th.
"""

"""
Normalize a requested stay and reject empty or backwards ranges.

Returns:
    (check_in, check_out) as naive UTC datetimes.

Raises:
    InvalidRange: if check_out is not after check_in.
"""
def normalize_range(check_in, check_out):
    check_in = as_datetime(check_in)
    check_out = as_datetime(check_out)

    if check_out <= check_in:
        raise InvalidRange(check_in, check_out)

    return check_in, check_out


def overlaps(check_in, check_out, other_in, other_out) -> bool:
    return check_in < other_out and check_out > other_in

"""
Return the blocking reservations on room that overlap [check_in, check_out).

Only confirmed and confirmed_by_hotel reservations are considered. When
ignore_booking_id is set, the reservation mirroring that booking is skipped,
so a pending booking can be checked against everything except itself.
"""
def conflicting_reservations(room, check_in, check_out, ignore_booking_id=None):
    check_in, check_out = normalize_range(check_in, check_out)

    return [
        r for r in room.reservations
        if r.status in BLOCKING_STATUSES
        and (ignore_booking_id is None or r.booking_id != ignore_booking_id)
        and overlaps(check_in, check_out, as_datetime(r.check_in), as_datetime(r.check_out))
    ]

"""
Decide whether room can be booked for [check_in, check_out).

A room is available when its global is_available switch is on and no
blocking reservation overlaps the requested range.

Raises:
    InvalidRange: if check_out is not after check_in.
"""
def is_available(room, check_in, check_out, ignore_booking_id=None) -> bool:
    conflicts = conflicting_reservations(room, check_in, check_out, ignore_booking_id)
    if not room.is_available:
        return False

    return not conflicts

"""
Number of nights billed for [check_in, check_out).

Partial days round up: a 25 hour stay is two nights.
"""
def nights_between(check_in, check_out) -> int:
    check_in, check_out = normalize_range(check_in, check_out)
    return math.ceil((check_out - check_in) / ONE_DAY)


def total_price(nightly_rate, check_in, check_out):
    return nightly_rate * nights_between(check_in, check_out)

"""
The blocking reservation in progress at `now`, or None.
"""
def current_reservation(room, now):
    now = as_datetime(now)
    for r in room.reservations:
        if r.status in BLOCKING_STATUSES and as_datetime(r.check_in) <= now < as_datetime(r.check_out):
            return r
    return None

"""
The earliest blocking reservation starting after `now`, or None.
"""
def next_reservation(room, now):
    now = as_datetime(now)
    upcoming = [
        r for r in room.reservations
        if r.status in BLOCKING_STATUSES and as_datetime(r.check_in) > now
    ]
    if not upcoming:
        return None

    return min(upcoming, key=lambda r: r.check_in)
