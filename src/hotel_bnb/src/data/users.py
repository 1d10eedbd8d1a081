"""
MongoEngine Document representing a user account.

Guests, hotel managers and admins share one collection and are told apart by
role. Managers keep the ids of the hotels they run in hotel_ids.
"""
import mongoengine

from infrastructure.dates import utc_now

ROLE_USER = 'user'
ROLE_ADMIN = 'admin'
ROLE_HOTEL_MANAGER = 'hotel_manager'

ROLES = (ROLE_USER, ROLE_ADMIN, ROLE_HOTEL_MANAGER)

"""
User document stored in the 'users' collection (db alias: 'core').

Fields:
    registered_date: When the account was created.
    name: Display name (required).
    email: Lower-cased contact email (required). Uniqueness is checked by
           services.data_service.create_account().
    phone: Contact phone number.
    id_number: National or passport ID number.
    role: One of ROLES.
    is_active: Deactivated accounts are kept for booking history.
    hotel_ids: Hotels managed by this user.
"""
class User(mongoengine.Document):
    # Naive UTC, like every other datetime stored by the app.
    registered_date = mongoengine.DateTimeField(default=utc_now)
    name = mongoengine.StringField(required=True)
    email = mongoengine.StringField(required=True)  # Always stored trimmed and lower-cased.
    phone = mongoengine.StringField()
    id_number = mongoengine.StringField()

    role = mongoengine.StringField(choices=ROLES, default=ROLE_USER)  # Registering a hotel promotes a user to hotel_manager.
    is_active = mongoengine.BooleanField(default=True)

    # Ids of the hotels this account manages; kept in step by register_hotel() and remove_hotel().
    hotel_ids = mongoengine.ListField(mongoengine.ObjectIdField())

    # MongoEngine metadata: which connection alias and collection this document uses.
    meta = {
        'db_alias': 'core',
        'collection': 'users',
        'indexes': ['email', 'role']
    }
