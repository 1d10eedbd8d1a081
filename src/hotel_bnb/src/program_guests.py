import datetime
from dateutil import parser
from switchlang import switch

import program_managers as managers
import services.availability_service as availability
import services.data_service as svc
from data.bookings import PAYMENT_METHODS
from program_managers import success_msg, error_msg
import infrastructure.state as state
from services.errors import HotelBnbError, NotFound

"""
Guest-facing console workflow.

This module provides the interactive command loop and actions for guests:
- Account creation and login via the managers helpers.
- Searching hotels.
- Finding a free room for a date range and booking it.
- Viewing and cancelling bookings.

Conventions match program_managers: switchlang.switch for dispatch,
infrastructure.state.active_account for the logged-in user, and
HotelBnbError from the service layer printed as an error message.
Numbered choices go through program_managers.choose_from().
"""


def run():
    print(' ****************** Welcome guest **************** ')
    print()

    show_commands()

    while True:
        # Prompt is prefixed with the account name when logged in.
        action = managers.get_action()

        try:
            with switch(action) as s:
                # Account actions are shared with the manager console.
                s.case('c', managers.create_account)
                s.case('l', managers.log_into_account)

                s.case('s', search_hotels)
                s.case('b', book_a_room)
                s.case('v', view_bookings)
                s.case('n', cancel_a_booking)

                s.case('m', lambda: 'change_mode')  # Back to the mode selector in program.py.

                s.case('?', show_commands)
                s.case('', lambda: None)
                s.case(['x', 'bye', 'exit', 'exit()'], managers.exit_app)

                s.default(managers.unknown_command)
        except HotelBnbError as x:
            error_msg(str(x))
            continue
        except ValueError as x:
            error_msg(f'Invalid input: {x}')
            continue

        # Pick up changes made by the action (new bookings, role changes).
        state.reload_account()

        if action:
            print()

        if s.result == 'change_mode':
            return


def show_commands():
    print('What action would you like to take:')
    print('[C]reate an account')
    print('[L]ogin to your account')
    print('[S]earch hotels')
    print('[B]ook a room')
    print('[V]iew your bookings')
    print('Cancel a booki[n]g')
    print('[M]ain menu')
    print('e[X]it app')
    print('[?] Help (this info)')
    print()

"""
Search active hotels by name and/or city.

Returns:
    The hotels found, best rated first.
"""
def search_hotels():
    print(' ****************** Search hotels **************** ')

    text = input("Hotel name contains (enter for any): ").strip()
    city = input("City (enter for any): ").strip()

    # With no criteria, show the featured hotels (or every hotel if none are featured).
    if not text and not city:
        hotels = svc.get_featured_hotels() or svc.search_hotels()
    else:
        hotels = svc.search_hotels(text=text or None, city=city or None)

    print("Found {} hotels.".format(len(hotels)))
    for idx, h in enumerate(hotels):
        print(" {}. {} in {}, from ${}/night, rated {}.".format(
            idx + 1, h.name, h.city or h.address, h.price, h.rating))

    return hotels

"""
Walk the guest through finding a free room and booking it.

Steps:
- Ensure the guest is logged in.
- Pick a hotel from a search.
- Collect check-in/out dates and party size.
- List rooms free for those dates and book the chosen one.
"""
def book_a_room():
    print(' ****************** Book a room **************** ')
    if not state.active_account:
        error_msg("You must log in first to book a room")
        return

    hotels = search_hotels()
    if not hotels:
        error_msg("Sorry, no hotels match your search.")
        return

    hotel = managers.choose_from(hotels, 'Which hotel (number)? ')
    if not hotel:
        return

    start_text = input("Check-in date [yyyy-mm-dd]: ")
    if not start_text.strip():
        error_msg('Cancelled')
        return

    checkin = parser.parse(start_text)
    checkout = parser.parse(input("Check-out date [yyyy-mm-dd]: "))

    if checkin >= checkout:
        error_msg('Check in must be before check out')
        return

    # Empty answers mean one adult and no children.
    adults = int(input("How many adults? ") or 1)
    children = int(input("How many children? ") or 0)

    # Only open rooms with no blocking stay in [checkin, checkout) that fit the party.
    rooms = svc.get_available_rooms(hotel, checkin, checkout, adults, children)

    print("There are {} rooms available in that time.".format(len(rooms)))
    for idx, r in enumerate(rooms):
        print(" {}. Room {} ({}) for ${}/night, ${} in total.".format(
            idx + 1,
            r.room_number,
            r.room_type,
            r.price,
            availability.total_price(r.price, checkin, checkout)))

    if not rooms:
        error_msg("Sorry, no rooms are available for that date.")
        return

    room = managers.choose_from(rooms, 'Which room do you want to book (number)? ')
    if not room:
        return

    print('Payment methods: ' + ', '.join(PAYMENT_METHODS))
    payment_method = input('How will you pay? ').strip().lower()
    id_number = input('National/Passport ID number: ')
    special_requests = input('Any special requests? ').strip() or None

    # The booking starts as pending until the hotel confirms it.
    booking = svc.create_booking(
        state.active_account, room, checkin, checkout,
        payment_method, id_number,
        adults=adults, children=children,
        special_requests=special_requests
    )

    success_msg('Successfully booked room {} at {} for ${} ({}).'.format(
        room.room_number, hotel.name, booking.total_price, booking.status))


def view_bookings():
    print(' ****************** Your bookings **************** ')
    if not state.active_account:
        error_msg("You must log in first to view your bookings")
        return []

    bookings = svc.get_bookings_for_user(state.active_account.email)
    hotel_names = {}  # hotel_id -> name, so each hotel is looked up once.

    print("You have {} bookings.".format(len(bookings)))
    for idx, b in enumerate(bookings):
        if b.hotel_id not in hotel_names:
            try:
                hotel_names[b.hotel_id] = svc.find_hotel_by_id(b.hotel_id).name
            except NotFound:
                # Cancelled and completed bookings outlive a removed hotel.
                hotel_names[b.hotel_id] = 'A removed hotel'

        print(' {}. {} from {} for {} nights, ${}, {}.'.format(
            idx + 1,
            hotel_names[b.hotel_id],
            datetime.date(b.check_in_date.year, b.check_in_date.month, b.check_in_date.day),
            availability.nights_between(b.check_in_date, b.check_out_date),
            b.total_price,
            b.status
        ))

    return bookings


def cancel_a_booking():
    bookings = view_bookings()
    if not bookings:
        return

    booking = managers.choose_from(bookings, "Which booking do you want to cancel (number)? ")
    if not booking:
        return

    # Cancelling releases the dates on the room straight away.
    svc.cancel_booking(booking)
    success_msg('Your booking was cancelled.')
