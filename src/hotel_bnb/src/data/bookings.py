"""
MongoEngine Document representing a guest's booking.

A Booking is the guest-facing record of a stay. Every booking is mirrored by
an embedded Reservation on its room (linked through Reservation.booking_id);
the two are kept at the same status by services.data_service.
"""
import mongoengine

from data.reservations import (STATUSES, STATUS_PENDING, STATUS_CONFIRMED,
                               STATUS_CONFIRMED_BY_HOTEL, STATUS_CANCELLED,
                               STATUS_COMPLETED)
from infrastructure.dates import utc_now

PAYMENT_PENDING = 'pending'
PAYMENT_PAID = 'paid'
PAYMENT_REFUNDED = 'refunded'
PAYMENT_COMPLETED = 'completed'

PAYMENT_STATUSES = (PAYMENT_PENDING, PAYMENT_PAID, PAYMENT_REFUNDED, PAYMENT_COMPLETED)
PAYMENT_METHODS = ('credit_card', 'bank_transfer', 'cash', 'telebirr')

# pending -> confirmed -> completed, cancelled from any live state.
# confirmed_by_hotel is the starting state when staff book for a guest.
ALLOWED_TRANSITIONS = {
    STATUS_PENDING: {STATUS_CONFIRMED, STATUS_CANCELLED},
    STATUS_CONFIRMED: {STATUS_COMPLETED, STATUS_CANCELLED},
    STATUS_CONFIRMED_BY_HOTEL: {STATUS_COMPLETED, STATUS_CANCELLED},
    STATUS_CANCELLED: set(),
    STATUS_COMPLETED: set(),
}

"""
Booking document stored in the 'bookings' collection (db alias: 'core').

    Fields:
        user_id / hotel_id / room_id: Who booked what, as raw ObjectIds.
        created_by: Staff member who booked on the guest's behalf, if any.

        booked_date: When the booking was made.
        check_in_date / check_out_date: The requested stay, [in, out).

        adults / children: Party size.
        room_price: Nightly rate of the room when the booking was made.
        total_price: room_price times the number of (rounded up) nights.

        status: Lifecycle state, see ALLOWED_TRANSITIONS.
        payment_status / payment_method: Payment bookkeeping.

        special_requests, customer_name, customer_email: Optional guest info.
        customer_id_number: National or passport ID number (required).
"""
class Booking(mongoengine.Document):
    # Raw ObjectIds rather than ReferenceFields, same as Hotel.room_ids.
    user_id = mongoengine.ObjectIdField(required=True)  # Guest who owns the stay.
    hotel_id = mongoengine.ObjectIdField(required=True)
    room_id = mongoengine.ObjectIdField(required=True)  # Room holding the mirrored Reservation.
    created_by = mongoengine.ObjectIdField()  # Set only when staff booked for the guest.

    # Naive UTC, like every other datetime stored by the app.
    booked_date = mongoengine.DateTimeField(default=utc_now)
    check_in_date = mongoengine.DateTimeField(required=True)  # Inclusive.
    check_out_date = mongoengine.DateTimeField(required=True)  # Exclusive.

    adults = mongoengine.IntField(default=1, min_value=1)
    children = mongoengine.IntField(default=0, min_value=0)
    room_price = mongoengine.FloatField(required=True, min_value=0)  # Rate at booking time; later room price changes do not apply.
    total_price = mongoengine.FloatField(required=True)

    status = mongoengine.StringField(choices=STATUSES, default=STATUS_PENDING)  # Kept equal to the Reservation's status.
    payment_status = mongoengine.StringField(choices=PAYMENT_STATUSES, default=PAYMENT_PENDING)  # Moved by data_service.set_payment_status().
    payment_method = mongoengine.StringField(choices=PAYMENT_METHODS, required=True)

    special_requests = mongoengine.StringField()
    customer_name = mongoengine.StringField()  # Copied from the account so staff listings need no extra lookup.
    customer_email = mongoengine.StringField()
    customer_id_number = mongoengine.StringField(required=True)

    # MongoEngine metadata: connection alias, collection and indexes.
    meta = {
        'db_alias': 'core',
        'collection': 'bookings',
        'indexes': ['user_id', 'hotel_id', '-booked_date'],
        'ordering': ['-booked_date']  # Newest first.
    }

    def can_move_to(self, status: str) -> bool:
        return status in ALLOWED_TRANSITIONS.get(self.status, set())
