"""
MongoEngine EmbeddedDocument representing one stay attached to a room.

Reservations live inside the parent Room document so that a room and every
interval that may block it are read together in one query. A reservation is
never removed from its room: cancelling or completing a stay only changes its
status, which keeps the room's booking history intact.
"""
import mongoengine

from infrastructure.dates import utc_now

STATUS_PENDING = 'pending'
STATUS_CONFIRMED = 'confirmed'
STATUS_CONFIRMED_BY_HOTEL = 'confirmed_by_hotel'
STATUS_CANCELLED = 'cancelled'
STATUS_COMPLETED = 'completed'

STATUSES = (
    STATUS_PENDING,
    STATUS_CONFIRMED,
    STATUS_CONFIRMED_BY_HOTEL,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
)

# Only these statuses hold the room; pending and cancelled stays never block.
BLOCKING_STATUSES = frozenset([STATUS_CONFIRMED, STATUS_CONFIRMED_BY_HOTEL])

"""
A single reservation interval [check_in, check_out) on a room.

    Fields:
        guest_id: ObjectId of the user who owns the stay.
        booking_id: ObjectId of the Booking document this interval mirrors.

        check_in: Start of the stay (inclusive).
        check_out: End of the stay (exclusive), so a new guest may check in
                   on the same day the previous one checks out.

        adults / children: Party size for the stay.
        total_price: Amount charged for the whole stay.
        status: One of STATUSES; see BLOCKING_STATUSES.
        created_date: When the interval was appended to the room.

    Notes:
    - ObjectIdField rather than ReferenceField because this document is
      embedded, same as the other foreign keys stored on rooms.
    - check_in and check_out are stored as naive UTC datetimes; use
      infrastructure.dates.as_datetime() before comparing against them.
"""
class Reservation(mongoengine.EmbeddedDocument):
    guest_id = mongoengine.ObjectIdField()  # User who owns the stay.
    booking_id = mongoengine.ObjectIdField()  # Booking document this interval mirrors.

    # The stay is [check_in, check_out); both are naive UTC.
    check_in = mongoengine.DateTimeField(required=True)
    check_out = mongoengine.DateTimeField(required=True)

    adults = mongoengine.IntField(default=1, min_value=1)
    children = mongoengine.IntField(default=0, min_value=0)
    total_price = mongoengine.FloatField(required=True)  # Same amount as Booking.total_price.

    # Only statuses in BLOCKING_STATUSES hold the room for these dates.
    status = mongoengine.StringField(choices=STATUSES, default=STATUS_PENDING)
    created_date = mongoengine.DateTimeField(default=utc_now)
