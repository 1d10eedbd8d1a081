"""
MongoEngine model representing a bookable hotel room.

Each Room document belongs to one hotel (hotel_id) and owns the embedded
Reservation intervals booked against it. The hotel only keeps a list of room
ids; the room is the single owner of its reservations.
"""

import mongoengine

from infrastructure.dates import utc_now

from data.reservations import Reservation

ROOM_TYPES = ('Single', 'Double', 'Suite', 'Deluxe', 'Family', 'Executive')

"""
Room document stored in the 'rooms' collection of the 'core' database alias.

Fields:
        registered_date: When this room was added to the system.
        hotel_id: ObjectId of the owning hotel.
        room_number: Number/label of the room, unique within its hotel.
        room_type: One of ROOM_TYPES.
        description: Free text shown to guests.
        price: Nightly rate, in the same currency as every booking total.
        is_available: Global switch; when False the room cannot be booked
                      for any dates.
        capacity_adults / capacity_children: Maximum party size.
        amenities: List of amenity names.
        reservations: Embedded Reservation intervals, in insertion order.

Reservations are only changed through add_reservation() and
set_reservation_status(); callers persist the room with .save() afterwards.
"""
class Room(mongoengine.Document):
    registered_date = mongoengine.DateTimeField(default=utc_now)

    hotel_id = mongoengine.ObjectIdField(required=True)  # Owning hotel.
    room_number = mongoengine.StringField(required=True)  # Unique within the hotel (see the index below).
    room_type = mongoengine.StringField(required=True, choices=ROOM_TYPES)
    description = mongoengine.StringField(required=True)
    price = mongoengine.FloatField(required=True, min_value=0)  # Nightly rate used for new bookings.
    is_available = mongoengine.BooleanField(default=True)  # Manager switch; False blocks every date.

    # Largest party the room can take.
    capacity_adults = mongoengine.IntField(default=1, min_value=1)
    capacity_children = mongoengine.IntField(default=0, min_value=0)
    amenities = mongoengine.ListField(mongoengine.StringField())

    # Every stay ever booked on this room, whatever its status.
    # Intervals are appended and have their status changed, never removed.
    reservations = mongoengine.EmbeddedDocumentListField(Reservation)

    # MongoEngine metadata: connection alias, collection and indexes.
    meta = {
        'db_alias': 'core',
        'collection': 'rooms',
        'indexes': [
            {'fields': ['hotel_id', 'room_number'], 'unique': True},
            ('room_type', 'price'),
        ]
    }

    def add_reservation(self, reservation: Reservation) -> Reservation:
        self.reservations.append(reservation)
        return reservation

    def find_reservation(self, booking_id):
        for r in self.reservations:
            if r.booking_id == booking_id:
                return r
        return None

    """
    Change the status of the interval mirroring booking_id.

    Returns the updated Reservation, or None if the room holds no interval
    for that booking (e.g. bookings created before the room tracked them).
    """
    def set_reservation_status(self, booking_id, status: str):
        reservation = self.find_reservation(booking_id)
        if reservation is None:
            return None

        reservation.status = status
        return reservation

    def fits_party(self, adults: int, children: int) -> bool:
        return adults <= self.capacity_adults and children <= self.capacity_children
