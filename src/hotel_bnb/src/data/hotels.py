"""
MongoEngine model representing a hotel listed on Hotel BnB.

A hotel does not embed its rooms. It keeps the ids of its rooms in room_ids
and they are resolved with Room.objects(id__in=hotel.room_ids).
"""

import mongoengine

from infrastructure.dates import utc_now

"""
Hotel document stored in the 'hotels' collection of the 'core' database alias.

Fields:
        registered_date: When the hotel was registered.
        manager_id: ObjectId of the User managing this hotel.
        name, description: Shown in search results.
        address, city, country: Location; country defaults to Ethiopia.
        price: Advertised nightly rate (rooms carry their own rates).
        rating: 0 to 5.
        is_featured: Promoted on the front page.
        is_active: Inactive hotels never show up in searches.
        amenities: List of amenity names.
        check_in_time / check_out_time / cancellation_policy: House policies.
        room_ids: Non-owning list of Room ids.
"""
class Hotel(mongoengine.Document):
    registered_date = mongoengine.DateTimeField(default=utc_now)

    manager_id = mongoengine.ObjectIdField(required=True)  # User running the hotel.
    name = mongoengine.StringField(required=True, max_length=100)  # Longer names are rejected on save.
    description = mongoengine.StringField(required=True)

    address = mongoengine.StringField(required=True)
    city = mongoengine.StringField()
    country = mongoengine.StringField(default='Ethiopia')

    price = mongoengine.FloatField(required=True, min_value=0)  # Advertised "from" rate; rooms carry their own.
    rating = mongoengine.FloatField(default=0, min_value=0, max_value=5)
    is_featured = mongoengine.BooleanField(default=False)
    is_active = mongoengine.BooleanField(default=True)  # Inactive hotels are left out of search_hotels().
    amenities = mongoengine.ListField(mongoengine.StringField())

    # House policies shown to guests.
    check_in_time = mongoengine.StringField(default='14:00')
    check_out_time = mongoengine.StringField(default='12:00')
    cancellation_policy = mongoengine.StringField(
        default='Free cancellation up to 24 hours before check-in')

    # Non-owning: rooms live in their own collection and point back via Room.hotel_id.
    room_ids = mongoengine.ListField(mongoengine.ObjectIdField())

    # MongoEngine metadata: connection alias, collection and indexes.
    meta = {
        'db_alias': 'core',
        'collection': 'hotels',
        'indexes': ['price', '-rating']
    }
