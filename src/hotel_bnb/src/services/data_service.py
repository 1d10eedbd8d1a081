from typing import List, Optional

import datetime
import logging

import bson
import mongoengine

from data.bookings import (Booking, PAYMENT_METHODS, PAYMENT_STATUSES,
                           PAYMENT_PAID)
from data.hotels import Hotel
from data.reservations import (Reservation, STATUS_PENDING, STATUS_CONFIRMED,
                               STATUS_CONFIRMED_BY_HOTEL, STATUS_CANCELLED,
                               STATUS_COMPLETED)
from data.rooms import Room, ROOM_TYPES
from data.users import User, ROLE_USER, ROLE_HOTEL_MANAGER
from infrastructure.dates import start_of_day, end_of_day, utc_now
import services.availability_service as availability
from services.errors import (InvalidTransition, NotFound, RoomUnavailable,
                             ValidationError)

logger = logging.getLogger(__name__)

"""
Service-layer helpers for creating and querying hotel, room and booking
documents using MongoEngine.

Notes:
- All persistence is done immediately via .save() on MongoEngine documents.
- Datetimes are naive UTC; infrastructure.dates.as_datetime() normalizes
  anything coming from the console or from callers.
- Relationships are stored via ObjectId references:
  - User.hotel_ids: Hotels the user manages.
  - Hotel.room_ids: Rooms of the hotel (the hotel does not own them).
  - Room.reservations: Embedded Reservation intervals, owned by the room.
  - Booking.room_id / Reservation.booking_id: a booking and its interval.
- Availability is checked and the reservation appended in two separate steps,
  with no lock or transaction in between. Two concurrent requests for the
- Documents are saved through _save(), which turns MongoEngine field
  validation failures into services.errors.ValidationError so the console
  can report them.
  same room and dates can both pass the check and double-book the room.
"""


def _save(document):
    try:
        document.save()
    except mongoengine.ValidationError as x:
        raise ValidationError(str(x)) from x
    return document

"""
Create and persist a new User account.

Parameters:
    name: Display name.
    email: Contact email; stored trimmed and lower-cased.
    phone, id_number: Optional contact and identity details.
    role: One of data.users.ROLES.

Raises:
    ValidationError: if an account with that email already exists.
"""
def create_account(name: str, email: str, phone: str = None,
                   role: str = ROLE_USER, id_number: str = None) -> User:
    email = email.strip().lower()
    if find_account_by_email(email):
        raise ValidationError(f'Account with email {email} already exists.')

    user = User()
    user.name = name
    user.email = email
    user.phone = phone
    user.id_number = id_number
    user.role = role

    _save(user)
    logger.info('Created %s account %s for %s', role, user.id, email)

    return user


def find_account_by_email(email: str) -> Optional[User]:
    user = User.objects(email=email.strip().lower()).first()
    return user


def find_account_by_id(user_id: bson.ObjectId) -> Optional[User]:
    return User.objects(id=user_id).first()

"""
Create a new Hotel managed by manager and link it to the manager's account.

A plain user who registers a hotel is promoted to hotel_manager.

Returns:
    The newly created Hotel document.
"""
def register_hotel(manager: User, name, description, address, price,
                   city=None, country=None, amenities=None) -> Hotel:
    hotel = Hotel()
    hotel.manager_id = manager.id
    hotel.name = name
    hotel.description = description
    hotel.address = address
    hotel.city = city
    if country:
        hotel.country = country
    hotel.price = price
    hotel.amenities = amenities or []

    _save(hotel)

    account = find_account_by_id(manager.id)
    account.hotel_ids.append(hotel.id)
    if account.role == ROLE_USER:
        account.role = ROLE_HOTEL_MANAGER
    _save(account)

    logger.info('Registered hotel %s (%s) for manager %s', hotel.id, name, manager.email)
    return hotel


def find_hotels_for_user(account: User) -> List[Hotel]:
    query = Hotel.objects(id__in=account.hotel_ids)
    hotels = list(query)

    return hotels


def find_hotel_by_id(hotel_id) -> Hotel:
    hotel = Hotel.objects(id=hotel_id).first()
    if not hotel:
        raise NotFound(f'Hotel {hotel_id} not found.')
    return hotel

# Listing details a manager may change; manager_id and room_ids are kept
# in step by the other operations.
HOTEL_EDITABLE_FIELDS = (
    'name', 'description', 'address', 'city', 'country', 'price', 'rating',
    'is_featured', 'is_active', 'amenities',
    'check_in_time', 'check_out_time', 'cancellation_policy',
)

"""
Change listing details of a hotel, e.g. update_hotel(hotel, price=120.0).

Raises:
    ValidationError: a field outside HOTEL_EDITABLE_FIELDS, or a value the
                     Hotel document rejects (too long a name, bad rating...).
"""
def update_hotel(hotel: Hotel, **fields) -> Hotel:
    unknown = sorted(set(fields) - set(HOTEL_EDITABLE_FIELDS))
    if unknown:
        raise ValidationError(f'Cannot change {", ".join(unknown)} of a hotel.')

    for name, value in fields.items():
        setattr(hotel, name, value)

    _save(hotel)
    logger.info('Updated hotel %s: %s', hotel.id, ', '.join(sorted(fields)))
    return hotel

"""
Delete a hotel together with its rooms and unlink it from its manager.

Bookings are kept as history. A hotel with bookings that are still pending
or confirmed cannot be removed; cancel or complete them first.

Raises:
    ValidationError: the hotel still has open bookings.
"""
def remove_hotel(hotel: Hotel):
    open_bookings = Booking.objects(
        hotel_id=hotel.id,
        status__in=[STATUS_PENDING, STATUS_CONFIRMED, STATUS_CONFIRMED_BY_HOTEL]
    ).count()
    if open_bookings:
        raise ValidationError(
            f'{hotel.name} still has {open_bookings} open bookings; cancel or complete them first.')

    rooms_deleted = Room.objects(hotel_id=hotel.id).delete()
    User.objects(hotel_ids=hotel.id).update(pull__hotel_ids=hotel.id)
    hotel.delete()

    logger.info('Removed hotel %s (%s) and %s rooms', hotel.id, hotel.name, rooms_deleted)

"""
Find active hotels, best rated first and cheapest first among equals.

Parameters:
    text: Case-insensitive substring of the hotel name.
    city: Exact city (case-insensitive).
    max_price: Upper bound on the advertised nightly price.
"""
def search_hotels(text: str = None, city: str = None, max_price: float = None) -> List[Hotel]:
    query = Hotel.objects(is_active=True)

    if text:
        query = query.filter(name__icontains=text)
    if city:
        query = query.filter(city__iexact=city)
    if max_price is not None:
        query = query.filter(price__lte=max_price)

    return list(query.order_by('-rating', 'price'))


def get_featured_hotels(limit: int = 6) -> List[Hotel]:
    query = Hotel.objects(is_featured=True, is_active=True) \
        .order_by('-rating', 'price') \
        .limit(limit)
    return list(query)

"""
Add a room to a hotel.

Room numbers are unique within a hotel. The room starts with no
reservations and is linked through hotel.room_ids.

Raises:
    ValidationError: unknown room type, negative price, no adult capacity,
                     or the hotel already has a room with that number.
"""
def add_room(hotel: Hotel, room_number, room_type, description, price,
             capacity_adults=1, capacity_children=0, amenities=None) -> Room:
    room_number = str(room_number).strip()
    if room_type not in ROOM_TYPES:
        raise ValidationError(f'Room type must be one of {", ".join(ROOM_TYPES)}.')
    if price < 0:
        raise ValidationError('Price cannot be negative.')
    if capacity_adults < 1 or capacity_children < 0:
        raise ValidationError('A room must sleep at least one adult.')
    if Room.objects(hotel_id=hotel.id, room_number=room_number).first():
        raise ValidationError(f'Room {room_number} already exists in {hotel.name}.')

    room = Room()
    room.hotel_id = hotel.id
    room.room_number = room_number
    room.room_type = room_type
    room.description = description
    room.price = price
    room.capacity_adults = capacity_adults
    room.capacity_children = capacity_children
    room.amenities = amenities or []

    _save(room)

    Hotel.objects(id=hotel.id).update_one(push__room_ids=room.id)
    hotel.reload()

    logger.info('Added room %s (%s) to hotel %s', room_number, room.id, hotel.id)
    return room


def find_rooms_for_hotel(hotel: Hotel) -> List[Room]:
    query = Room.objects(id__in=hotel.room_ids).order_by('room_number')
    return list(query)


def find_room_by_id(room_id) -> Room:
    room = Room.objects(id=room_id).first()
    if not room:
        raise NotFound(f'Room {room_id} not found.')
    return room


def set_room_availability(room: Room, is_available: bool) -> Room:
    room.is_available = is_available
    _save(room)

    logger.info('Room %s is_available=%s', room.id, is_available)
    return room

"""
Change a room's rate, capacity, type or description.

Only the arguments given are changed. Existing bookings keep the price and
party size they were made with.

Raises:
    ValidationError: same rules as add_room().
"""
def update_room(room: Room, price: float = None, capacity_adults: int = None,
                capacity_children: int = None, room_type: str = None,
                description: str = None) -> Room:
    if room_type is not None and room_type not in ROOM_TYPES:
        raise ValidationError(f'Room type must be one of {", ".join(ROOM_TYPES)}.')
    if price is not None and price < 0:
        raise ValidationError('Price cannot be negative.')
    if (capacity_adults is not None and capacity_adults < 1) or \
            (capacity_children is not None and capacity_children < 0):
        raise ValidationError('A room must sleep at least one adult.')

    if price is not None:
        room.price = price
    if capacity_adults is not None:
        room.capacity_adults = capacity_adults
    if capacity_children is not None:
        room.capacity_children = capacity_children
    if room_type is not None:
        room.room_type = room_type
    if description is not None:
        room.description = description

    _save(room)
    logger.info('Updated room %s: $%s/night, sleeps %s+%s',
                room.id, room.price, room.capacity_adults, room.capacity_children)
    return room


def remove_room(room: Room):
    Hotel.objects(id=room.hotel_id).update_one(pull__room_ids=room.id)
    room.delete()
    logger.info('Removed room %s from hotel %s', room.id, room.hotel_id)

"""
Rooms of hotel that can take the given party for [check_in, check_out).

Returns:
    Available rooms, cheapest first.
"""
def get_available_rooms(hotel: Hotel, check_in, check_out,
                        adults: int = 1, children: int = 0) -> List[Room]:
    check_in, check_out = availability.normalize_range(check_in, check_out)

    rooms = Room.objects(id__in=hotel.room_ids, is_available=True).order_by('price')

    return [
        r for r in rooms
        if r.fits_party(adults, children) and availability.is_available(r, check_in, check_out)
    ]

"""
Book room for account from check_in to check_out.

The booking starts as pending, or as confirmed_by_hotel when created_by is
given (a staff member booking on the guest's behalf). The price is the
room's current nightly rate times the nights of the stay, rounded up.

Side Effects:
    - Persists a new Booking.
    - Appends the mirrored Reservation to the room and saves it.

Raises:
    InvalidRange: check_out is not after check_in.
    ValidationError: bad party size, payment method or missing ID number.
    RoomUnavailable: the room is disabled or a blocking stay overlaps.
"""
def create_booking(account: User, room: Room, check_in, check_out,
                   payment_method: str, customer_id_number: str,
                   adults: int = 1, children: int = 0,
                   special_requests: str = None,
                   created_by: User = None) -> Booking:
    check_in, check_out = availability.normalize_range(check_in, check_out)

    if not customer_id_number or not customer_id_number.strip():
        raise ValidationError('National/Passport ID number is required.')
    if payment_method not in PAYMENT_METHODS:
        raise ValidationError(f'Unknown payment method {payment_method}.')
    if adults < 1 or children < 0:
        raise ValidationError('A booking needs at least one adult.')
    if not room.fits_party(adults, children):
        raise ValidationError(
            f'Room {room.room_number} sleeps {room.capacity_adults} adults '
            f'and {room.capacity_children} children.')

    # Re-fetch so the check runs against the most recent reservations.
    # Check and _save(room) below are not atomic; see the module notes.
    room = find_room_by_id(room.id)
    if not availability.is_available(room, check_in, check_out):
        logger.warning('Rejected booking of room %s from %s to %s: not available',
                       room.id, check_in, check_out)
        raise RoomUnavailable(room, check_in, check_out)

    booking = Booking()
    booking.user_id = account.id
    booking.hotel_id = room.hotel_id
    booking.room_id = room.id
    booking.check_in_date = check_in
    booking.check_out_date = check_out
    booking.adults = adults
    booking.children = children
    booking.room_price = room.price
    booking.total_price = availability.total_price(room.price, check_in, check_out)
    booking.payment_method = payment_method
    booking.special_requests = special_requests
    booking.customer_name = account.name
    booking.customer_email = account.email
    booking.customer_id_number = customer_id_number.strip()
    if created_by is not None:
        booking.created_by = created_by.id
        booking.status = STATUS_CONFIRMED_BY_HOTEL
    else:
        booking.status = STATUS_PENDING

    _save(booking)

    reservation = Reservation()
    reservation.guest_id = account.id
    reservation.booking_id = booking.id
    reservation.check_in = check_in
    reservation.check_out = check_out
    reservation.adults = adults
    reservation.children = children
    reservation.total_price = booking.total_price
    reservation.status = booking.status

    room.add_reservation(reservation)
    try:
        _save(room)
    except Exception:
        # Drop the booking so it never exists without its interval.
        booking.delete()
        raise

    logger.info('Booked room %s for %s from %s to %s (%s, total %s)',
                room.id, account.email, check_in, check_out,
                booking.status, booking.total_price)
    return booking


def find_booking_by_id(booking_id) -> Booking:
    booking = Booking.objects(id=booking_id).first()
    if not booking:
        raise NotFound(f'Booking {booking_id} not found.')
    return booking

"""
Move booking and its room reservation to status together.

The booking is saved first. If the room then fails to save, the booking is
put back to its previous status before the error propagates, so the two
never disagree.

Raises:
    InvalidTransition: the booking's lifecycle does not allow the move.
"""
def _change_status(booking: Booking, status: str) -> Booking:
    if not booking.can_move_to(status):
        raise InvalidTransition(booking, status)

    old_status = booking.status
    booking.status = status
    try:
        _save(booking)
    except Exception:
        booking.status = old_status
        raise

    room = Room.objects(id=booking.room_id).first()
    if room is not None and room.set_reservation_status(booking.id, status) is not None:
        try:
            _save(room)
        except Exception:
            booking.status = old_status
            booking.save()
            raise

    logger.info('Booking %s: %s -> %s', booking.id, old_status, status)
    return booking

"""
Confirm a pending booking.

Pending stays do not block the room, so another booking may have been
confirmed for the same dates in the meantime; the room is checked again
(ignoring this booking's own reservation) before confirming.

Raises:
    InvalidTransition: the booking is not pending.
    RoomUnavailable: the dates were taken while the booking was pending.
"""
def confirm_booking(booking: Booking) -> Booking:
    if not booking.can_move_to(STATUS_CONFIRMED):
        raise InvalidTransition(booking, STATUS_CONFIRMED)

    room = find_room_by_id(booking.room_id)
    if not availability.is_available(room, booking.check_in_date, booking.check_out_date,
                                     ignore_booking_id=booking.id):
        logger.warning('Cannot confirm booking %s: room %s no longer available',
                       booking.id, room.id)
        raise RoomUnavailable(room, booking.check_in_date, booking.check_out_date)

    return _change_status(booking, STATUS_CONFIRMED)

"""
Cancel a booking and release its dates on the room.

The reservation stays on the room with status cancelled, so it no longer
blocks other bookings but remains in the room's history.
"""
def cancel_booking(booking: Booking) -> Booking:
    return _change_status(booking, STATUS_CANCELLED)


def complete_booking(booking: Booking) -> Booking:
    return _change_status(booking, STATUS_COMPLETED)

"""
Record where the payment for a booking stands.

Payment is tracked separately from the booking lifecycle; a cancelled
booking may still move to refunded, but not to paid.

Raises:
    ValidationError: unknown payment status, or paying for a cancelled booking.
"""
def set_payment_status(booking: Booking, payment_status: str) -> Booking:
    if payment_status not in PAYMENT_STATUSES:
        raise ValidationError(f'Payment status must be one of {", ".join(PAYMENT_STATUSES)}.')
    if payment_status == PAYMENT_PAID and booking.status == STATUS_CANCELLED:
        raise ValidationError('A cancelled booking cannot be marked as paid.')

    old_status = booking.payment_status
    booking.payment_status = payment_status
    _save(booking)

    logger.info('Booking %s payment: %s -> %s', booking.id, old_status, payment_status)
    return booking


def mark_booking_paid(booking: Booking) -> Booking:
    return set_payment_status(booking, PAYMENT_PAID)

"""
Get all bookings made by the account identified by email, newest first.
"""
def get_bookings_for_user(email: str) -> List[Booking]:
    account = find_account_by_email(email)
    if not account:
        raise NotFound(f'Could not find account with email {email}.')

    bookings = Booking.objects(user_id=account.id).order_by('-booked_date')
    return list(bookings)

"""
Get bookings for a hotel, newest first.

Parameters:
    check_in: Only bookings starting on or after this day.
    check_out: Only bookings ending on or before this day (inclusive of the
               whole day).
"""
def get_bookings_for_hotel(hotel: Hotel, check_in=None, check_out=None) -> List[Booking]:
    query = Booking.objects(hotel_id=hotel.id)

    if check_in is not None:
        query = query.filter(check_in_date__gte=start_of_day(check_in))
    if check_out is not None:
        query = query.filter(check_out_date__lte=end_of_day(check_out))

    return list(query.order_by('-booked_date'))


def now() -> datetime.datetime:
    return utc_now()
