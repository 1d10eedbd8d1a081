import datetime
from colorama import Fore
from dateutil import parser
from switchlang import switch

import infrastructure.state as state
import services.availability_service as availability
import services.data_service as svc
from data.bookings import PAYMENT_METHODS
from data.rooms import ROOM_TYPES
from services.errors import HotelBnbError


"""
Hotel-manager-facing console workflow.

This module provides the interactive command loop and actions for managers:
- Account creation and login.
- Registering, editing and removing hotels; adding and updating rooms.
- Switching rooms on and off.
- Booking a room on a guest's behalf.
- Viewing the bookings of a hotel, moving them through their lifecycle and
  recording payment.

Conventions:
- switchlang.switch gives a case-like dispatch on the typed command.
- infrastructure.state.active_account is the logged-in user.
- Persistence and validation live in services.data_service (svc); errors it
  raises (HotelBnbError) are printed in red and the loop continues.
- Typed numbers and dates that cannot be parsed (ValueError) are reported
  the same way.
"""

"""
Entry point for the manager workflow loop.

Runs until the user switches mode ('m') or exits the app.
"""
def run():
    print(' ****************** Welcome hotel manager **************** ')
    print()

    show_commands()

    while True:
        # Prompt is prefixed with the account name when logged in.
        action = get_action()

        try:
            with switch(action) as s:
                s.case('c', create_account)
                s.case('l', log_into_account)
                s.case('y', list_hotels)
                s.case('r', register_hotel)
                s.case('e', edit_hotel)
                s.case('h', remove_hotel)
                s.case('a', add_room)
                s.case('u', update_room)
                s.case('t', toggle_room_availability)
                s.case('b', book_for_guest)
                s.case('v', view_bookings)
                s.case('f', confirm_booking)
                s.case('n', cancel_booking)
                s.case('d', complete_booking)
                s.case('p', mark_booking_paid)
                s.case('m', lambda: 'change_mode')  # Back to the mode selector in program.py.
                s.case(['x', 'bye', 'exit', 'exit()'], exit_app)
                s.case('?', show_commands)
                s.case('', lambda: None)
                s.default(unknown_command)
        except HotelBnbError as x:
            # Service-level refusal: show it and keep the session going.
            error_msg(str(x))
            continue
        except ValueError as x:
            error_msg(f'Invalid input: {x}')
            continue

        # Cosmetic spacing after actions.
        if action:
            print()

        if s.result == 'change_mode':
            return


def show_commands():
    print('What action would you like to take:')
    print('[C]reate an account')
    print('[L]ogin to your account')
    print('List [y]our hotels')
    print('[R]egister a hotel')
    print('[E]dit a hotel')
    print('Remove a [h]otel')
    print('[A]dd a room')
    print('[U]pdate a room')
    print('[T]oggle room availability')
    print('[B]ook a room for a guest')
    print('[V]iew hotel bookings')
    print('Con[f]irm a booking')
    print('Cancel a booki[n]g')
    print('Mark a booking [d]one')
    print('Mark a booking [p]aid')
    print('Change [M]ode (guest or hotel manager)')
    print('e[X]it app')
    print('[?] Help (this info)')
    print()

"""
Create a new account. Raises ValidationError (shown to the user) if the
email is already taken.
"""
def create_account():
    print(' ****************** REGISTER **************** ')

    name = input('What is your name? ')
    email = input('What is your email? ')
    phone = input('What is your phone number? ')

    # svc normalizes the email and enforces uniqueness.
    state.active_account = svc.create_account(name, email, phone=phone)
    success_msg(f"Created new account with id {state.active_account.id}.")


def log_into_account():
    print(' ****************** LOGIN **************** ')

    email = input('What is your email? ').strip().lower()
    account = svc.find_account_by_email(email)

    if not account:
        error_msg(f'Could not find account with email {email}.')
        return

    state.active_account = account
    success_msg('Logged in successfully.')


def register_hotel():
    print(' ****************** REGISTER HOTEL **************** ')

    if not state.active_account:
        error_msg('You must login first to register a hotel.')
        return

    # Early cancel on an empty name.
    name = input('What is the name of your hotel? ')
    if not name:
        error_msg('Cancelled')
        return

    description = input('Describe your hotel: ')
    address = input('Street address: ')
    city = input('City: ')
    price = float(input('Advertised price per night: '))

    hotel = svc.register_hotel(state.active_account, name, description, address, price, city=city)

    # The account now lists the new hotel id (and may have become a manager).
    state.reload_account()
    success_msg(f'Registered new hotel with id {hotel.id}.')

"""
Change the name, description, city or advertised price of a hotel.
Each prompt left empty keeps the current value.
"""
def edit_hotel():
    print(' ****************** Edit a hotel **************** ')

    if not state.active_account:
        error_msg("You must log in first to edit a hotel")
        return

    hotel = choose_hotel()
    if not hotel:
        return

    # Only the answered prompts end up in the update.
    changes = {}
    name = input(f'New name (enter to keep {hotel.name}): ').strip()
    if name:
        changes['name'] = name
    description = input('New description (enter to keep): ').strip()
    if description:
        changes['description'] = description
    city = input(f'New city (enter to keep {hotel.city}): ').strip()
    if city:
        changes['city'] = city
    price = input(f'New price per night (enter to keep ${hotel.price}): ').strip()
    if price:
        changes['price'] = float(price)

    if not changes:
        error_msg('Nothing changed.')
        return

    svc.update_hotel(hotel, **changes)
    success_msg(f'Updated {hotel.name}.')


def remove_hotel():
    print(' ****************** Remove a hotel **************** ')

    if not state.active_account:
        error_msg("You must log in first to remove a hotel")
        return

    hotel = choose_hotel()
    if not hotel:
        return

    if not input(f'Remove {hotel.name} and all its rooms [y, n]? ').lower().startswith('y'):
        error_msg('Cancelled')
        return

    svc.remove_hotel(hotel)

    # Drop the hotel id from the in-memory account as well.
    state.reload_account()
    success_msg(f'Removed {hotel.name}.')

"""
List the active account's hotels with their rooms and reservations.

Parameters:
- suppress_header: When True, omits the banner (used when listing is a step
    inside another action).
"""
def list_hotels(suppress_header=False):
    if not suppress_header:
        print(' ******************     Your hotels     **************** ')

    if not state.active_account:
        error_msg('You must login first to list your hotels.')
        return []

    hotels = svc.find_hotels_for_user(state.active_account)
    print(f"You have {len(hotels)} hotels.")
    for idx, h in enumerate(hotels):
        print(f' {idx + 1}. {h.name} in {h.city or h.address}, ${h.price}/night.')
        for r in svc.find_rooms_for_hotel(h):
            print('      * Room {} ({}), ${}/night, {}.'.format(
                r.room_number, r.room_type, r.price,
                'open' if r.is_available else 'closed'))
            # Nights are counted the way the stay is billed (rounded up).
            for res in r.reservations:
                print('          - {} for {} nights, {}'.format(
                    datetime.date(res.check_in.year, res.check_in.month, res.check_in.day),
                    availability.nights_between(res.check_in, res.check_out),
                    res.status))

    return hotels

"""
Ask for an entry of items by its 1-based number in the list just printed.

Returns:
    The chosen item, or None when the answer is empty (cancel) or out of range.

Raises:
    ValueError: the answer is not a number.
"""
def choose_from(items, prompt):
    text = input(prompt)
    if not text.strip():
        error_msg('Cancelled')
        return None

    idx = int(text) - 1
    if not 0 <= idx < len(items):
        error_msg(f'Please pick a number from 1 to {len(items)}.')
        return None

    return items[idx]


def choose_hotel():
    hotels = list_hotels(suppress_header=True)
    if not hotels:
        return None

    return choose_from(hotels, "Enter hotel number: ")


def choose_room(hotel):
    rooms = svc.find_rooms_for_hotel(hotel)
    if not rooms:
        error_msg(f'{hotel.name} has no rooms yet.')
        return None

    for idx, r in enumerate(rooms):
        print(f' {idx + 1}. Room {r.room_number} ({r.room_type})')

    return choose_from(rooms, "Enter room number (from the list): ")


def add_room():
    print(' ****************** Add a room **************** ')

    if not state.active_account:
        error_msg("You must log in first to add a room")
        return

    hotel = choose_hotel()
    if not hotel:
        return

    room_number = input("Room number: ")
    print('Room types: ' + ', '.join(ROOM_TYPES))
    room_type = input("Room type: ").strip().title()  # 'double' -> 'Double'
    description = input("Describe the room: ")
    price = float(input("Price per night: "))
    adults = int(input("How many adults can stay? "))
    children = int(input("How many children can stay? ") or 0)

    # svc checks the type, price, capacity and room number uniqueness.
    room = svc.add_room(hotel, room_number, room_type, description, price,
                        capacity_adults=adults, capacity_children=children)

    success_msg(f'Added room {room.room_number} to {hotel.name}.')

"""
Change a room's nightly rate and capacity. Empty answers keep the current
value; bookings already made keep their price.
"""
def update_room():
    print(' ****************** Update a room **************** ')

    if not state.active_account:
        error_msg("You must log in first to update a room")
        return

    hotel = choose_hotel()
    if not hotel:
        return

    room = choose_room(hotel)
    if not room:
        return

    price = input(f'New price per night (enter to keep ${room.price}): ').strip()
    adults = input(f'How many adults can stay (enter to keep {room.capacity_adults})? ').strip()
    children = input(f'How many children can stay (enter to keep {room.capacity_children})? ').strip()

    # None leaves the field as it is.
    room = svc.update_room(
        room,
        price=float(price) if price else None,
        capacity_adults=int(adults) if adults else None,
        capacity_children=int(children) if children else None,
    )

    success_msg('Room {} now costs ${}/night and sleeps {} adults and {} children.'.format(
        room.room_number, room.price, room.capacity_adults, room.capacity_children))


def toggle_room_availability():
    print(' ****************** Open / close a room **************** ')

    if not state.active_account:
        error_msg("You must log in first to change a room")
        return

    hotel = choose_hotel()
    if not hotel:
        return

    room = choose_room(hotel)
    if not room:
        return

    room = svc.set_room_availability(room, not room.is_available)
    success_msg('Room {} is now {}.'.format(
        room.room_number, 'open' if room.is_available else 'closed'))

    # Closing a room does not cancel its stays; show what is still booked.
    now = svc.now()
    current = availability.current_reservation(room, now)
    upcoming = availability.next_reservation(room, now)
    if current:
        print(f' Currently occupied until {current.check_out:%Y-%m-%d}.')
    if upcoming:
        print(f' Next stay starts {upcoming.check_in:%Y-%m-%d}.')

"""
Book one of the manager's rooms for a guest who already has an account.

Staff bookings start as confirmed_by_hotel, so they hold the room at once
and need no confirmation step.
"""
def book_for_guest():
    print(' ****************** Book a room for a guest **************** ')

    if not state.active_account:
        error_msg("You must log in first to book for a guest")
        return

    hotel = choose_hotel()
    if not hotel:
        return

    room = choose_room(hotel)
    if not room:
        return

    # The booking is made on the guest's account, not the manager's.
    email = input("Guest's email: ").strip().lower()
    guest = svc.find_account_by_email(email)
    if not guest:
        error_msg(f'Could not find account with email {email}.')
        return

    start_text = input("Check-in date [yyyy-mm-dd]: ")
    if not start_text.strip():
        error_msg('Cancelled')
        return

    checkin = parser.parse(start_text)
    checkout = parser.parse(input("Check-out date [yyyy-mm-dd]: "))
    adults = int(input("How many adults? ") or 1)
    children = int(input("How many children? ") or 0)

    print('Payment methods: ' + ', '.join(PAYMENT_METHODS))
    payment_method = input('How will the guest pay? ').strip().lower()
    id_number = input("Guest's National/Passport ID number: ")

    # created_by marks this as a staff booking.
    booking = svc.create_booking(
        guest, room, checkin, checkout,
        payment_method, id_number,
        adults=adults, children=children,
        created_by=state.active_account
    )

    success_msg('Booked room {} at {} for {}, ${} ({}).'.format(
        room.room_number, hotel.name, guest.name, booking.total_price, booking.status))

"""
Show the bookings of one of the manager's hotels, optionally filtered by
a check-in day and/or a check-out day.

Returns:
    The bookings shown, so other actions can pick one by number.
"""
def view_bookings():
    print(' ****************** Hotel bookings **************** ')

    if not state.active_account:
        error_msg("You must log in first to view bookings")
        return []

    hotel = choose_hotel()
    if not hotel:
        return []

    # Both filters are optional; each keeps whole days.
    start_text = input("Only bookings starting on or after [yyyy-mm-dd, enter for all]: ")
    end_text = input("Only bookings ending on or before [yyyy-mm-dd, enter for all]: ")
    check_in = parser.parse(start_text) if start_text.strip() else None
    check_out = parser.parse(end_text) if end_text.strip() else None

    bookings = svc.get_bookings_for_hotel(hotel, check_in, check_out)

    print("{} has {} bookings.".format(hotel.name, len(bookings)))
    for idx, b in enumerate(bookings):
        print(' {}. {} ({}), from {} for {} nights, ${}, {}, payment {}.'.format(
            idx + 1,
            b.customer_name,
            b.customer_email,
            datetime.date(b.check_in_date.year, b.check_in_date.month, b.check_in_date.day),
            availability.nights_between(b.check_in_date, b.check_out_date),
            b.total_price,
            b.status,
            b.payment_status
        ))

    return bookings


def choose_booking():
    bookings = view_bookings()
    if not bookings:
        return None

    return choose_from(bookings, "Enter booking number: ")


def confirm_booking():
    booking = choose_booking()
    if not booking:
        return

    # Raises RoomUnavailable if the dates were taken while it was pending.
    svc.confirm_booking(booking)
    success_msg(f'Booking for {booking.customer_name} confirmed.')


def cancel_booking():
    booking = choose_booking()
    if not booking:
        return

    svc.cancel_booking(booking)
    success_msg(f'Booking for {booking.customer_name} cancelled; the room is free again.')


def complete_booking():
    booking = choose_booking()
    if not booking:
        return

    svc.complete_booking(booking)
    success_msg(f'Booking for {booking.customer_name} completed.')


def mark_booking_paid():
    booking = choose_booking()
    if not booking:
        return

    svc.mark_booking_paid(booking)
    success_msg(f'Booking for {booking.customer_name} marked as paid.')


def exit_app():
    print()
    print('bye')
    # program.main() treats KeyboardInterrupt as a normal exit.
    raise KeyboardInterrupt()

"""
Prompt for the next action, prefixed with the account name when logged in.

Returns:
    The command, lower-cased and stripped.
"""
def get_action():
    text = '> '
    if state.active_account:
        text = f'{state.active_account.name}> '

    action = input(Fore.YELLOW + text + Fore.WHITE)
    return action.strip().lower()


def unknown_command():
    print("Sorry we didn't understand that command.")


def success_msg(text):
    print(Fore.LIGHTGREEN_EX + text + Fore.WHITE)


def error_msg(text):
    print(Fore.LIGHTRED_EX + text + Fore.WHITE)
