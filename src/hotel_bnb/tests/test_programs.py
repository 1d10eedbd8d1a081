"""
Console workflow tests: input() is fed from a script of answers.
"""
from datetime import timedelta

import pytest

from data.bookings import Booking, PAYMENT_PAID
from data.hotels import Hotel
from data.reservations import (STATUS_CONFIRMED, STATUS_CONFIRMED_BY_HOTEL,
                               STATUS_CANCELLED, STATUS_COMPLETED)
from data.rooms import Room
import infrastructure.state as state
import program_guests
import program_managers
import services.data_service as svc


@pytest.fixture
def answers(monkeypatch):
    def feed(*lines):
        it = iter(lines)
        monkeypatch.setattr('builtins.input', lambda prompt='': next(it))
    yield feed
    state.active_account = None


def test_manager_duplicate_account_is_reported(db, answers, capsys):
    answers(
        'c', 'Selam', 'selam@example.com', '+251911000000',
        'c', 'Someone', 'SELAM@example.com', '+251911000009',
        'm',
    )

    program_managers.run()

    out = capsys.readouterr().out
    assert 'Created new account' in out
    assert 'already exists' in out
    assert state.active_account.email == 'selam@example.com'


def test_guest_books_a_room(db, answers, capsys):
    manager = svc.create_account('Selam', 'selam@example.com')
    hotel = svc.register_hotel(manager, 'Blue Nile Lodge', 'Lakeside', 'Bole Road 12', 90.0)
    svc.add_room(hotel, '101', 'Double', 'Garden view', 100.0, capacity_adults=2)
    guest = svc.create_account('Abel', 'abel@example.com')

    answers(
        'l', 'abel@example.com',
        'b', '', '', '1', '2024-06-10', '2024-06-12', '2', '', '1',
        'cash', 'ET-123456', '',
        'm',
    )

    program_guests.run()

    out = capsys.readouterr().out
    assert 'Successfully booked room 101 at Blue Nile Lodge for $200.0 (pending).' in out

    booking = Booking.objects(user_id=guest.id).first()
    assert booking.total_price == 200.0
    assert booking.adults == 2


def test_guest_sees_booking_errors(db, answers, capsys):
    svc.create_account('Abel', 'abel@example.com')
    manager = svc.create_account('Selam', 'selam@example.com')
    hotel = svc.register_hotel(manager, 'Blue Nile Lodge', 'Lakeside', 'Bole Road 12', 90.0)
    svc.add_room(hotel, '101', 'Double', 'Garden view', 100.0)

    answers(
        'l', 'abel@example.com',
        'b', '', '', '1', '2024-06-10', '2024-06-12', '', '', '1',
        'cash', '   ', '',
        'm',
    )

    program_guests.run()

    assert 'ID number is required' in capsys.readouterr().out
    assert Booking.objects.count() == 0


def setup_lodge():
    manager = svc.create_account('Selam', 'selam@example.com')
    hotel = svc.register_hotel(manager, 'Blue Nile Lodge', 'Lakeside', 'Bole Road 12', 90.0,
                               city='Addis Ababa')
    room = svc.add_room(hotel, '101', 'Double', 'Garden view', 100.0, capacity_adults=2)
    guest = svc.create_account('Abel', 'abel@example.com')
    return manager, hotel, room, guest


def guest_booking(guest, room, check_in='2024-06-10', check_out='2024-06-12', **kwargs):
    return svc.create_booking(guest, room, check_in, check_out, 'cash', 'ET-123456', **kwargs)


def test_manager_sees_document_errors_and_keeps_going(db, answers, capsys):
    answers(
        'c', 'Selam', 'selam@example.com', '',
        'r', 'x' * 101, 'Lakeside', 'Bole Road 12', 'Addis Ababa', '90',
        'm',
    )

    program_managers.run()

    assert 'too long' in capsys.readouterr().out
    assert Hotel.objects.count() == 0


def test_manager_sees_bad_numbers_and_keeps_going(db, answers, capsys):
    setup_lodge()

    answers(
        'l', 'selam@example.com',
        'a', '1', '102', 'Single', 'Courtyard', 'lots',
        'e', '5',
        'm',
    )

    program_managers.run()

    out = capsys.readouterr().out
    assert 'Invalid input' in out
    assert 'Please pick a number from 1 to 1.' in out
    assert Room.objects.count() == 1


def test_manager_books_for_a_guest(db, answers, capsys):
    manager, hotel, room, guest = setup_lodge()

    answers(
        'l', 'selam@example.com',
        'b', '1', '1', 'abel@example.com', '2024-06-10', '2024-06-12', '2', '',
        'cash', 'ET-123456',
        'm',
    )

    program_managers.run()

    out = capsys.readouterr().out
    assert 'Booked room 101 at Blue Nile Lodge for Abel, $200.0 (confirmed_by_hotel).' in out

    booking = Booking.objects(user_id=guest.id).first()
    assert booking.status == STATUS_CONFIRMED_BY_HOTEL
    assert booking.created_by == manager.id
    assert svc.find_room_by_id(room.id).reservations[0].status == STATUS_CONFIRMED_BY_HOTEL
    assert svc.get_available_rooms(hotel, '2024-06-11', '2024-06-12') == []


def test_manager_cannot_book_for_unknown_guest(db, answers, capsys):
    setup_lodge()

    answers(
        'l', 'selam@example.com',
        'b', '1', '1', 'nobody@example.com',
        'm',
    )

    program_managers.run()

    assert 'Could not find account with email nobody@example.com.' in capsys.readouterr().out
    assert Booking.objects.count() == 0


def test_manager_edits_hotel(db, answers, capsys):
    _, hotel, _, _ = setup_lodge()

    answers(
        'l', 'selam@example.com',
        'e', '1', 'Blue Nile Resort', '', '', '120',
        'm',
    )

    program_managers.run()

    saved = svc.find_hotel_by_id(hotel.id)
    assert saved.name == 'Blue Nile Resort'
    assert saved.price == 120.0
    assert saved.description == 'Lakeside'
    assert saved.city == 'Addis Ababa'


def test_manager_removes_hotel(db, answers, capsys):
    setup_lodge()

    answers(
        'l', 'selam@example.com',
        'h', '1', 'y',
        'm',
    )

    program_managers.run()

    assert 'Removed Blue Nile Lodge.' in capsys.readouterr().out
    assert Hotel.objects.count() == 0
    assert Room.objects.count() == 0
    assert state.active_account.hotel_ids == []


def test_manager_updates_room(db, answers, capsys):
    _, _, room, _ = setup_lodge()

    answers(
        'l', 'selam@example.com',
        'u', '1', '1', '150', '3', '',
        'm',
    )

    program_managers.run()

    saved = svc.find_room_by_id(room.id)
    assert saved.price == 150.0
    assert saved.capacity_adults == 3
    assert saved.capacity_children == 0


def test_manager_confirms_booking(db, answers, capsys):
    _, _, room, guest = setup_lodge()
    booking = guest_booking(guest, room)

    answers(
        'l', 'selam@example.com',
        'f', '1', '', '', '1',
        'm',
    )

    program_managers.run()

    assert 'Booking for Abel confirmed.' in capsys.readouterr().out
    assert svc.find_booking_by_id(booking.id).status == STATUS_CONFIRMED
    assert svc.find_room_by_id(room.id).reservations[0].status == STATUS_CONFIRMED


def test_manager_cancels_confirmed_booking_and_room_is_offered_again(db, answers, capsys):
    _, hotel, room, guest = setup_lodge()
    booking = guest_booking(guest, room)
    svc.confirm_booking(booking)
    assert svc.get_available_rooms(hotel, '2024-06-10', '2024-06-12') == []

    answers(
        'l', 'selam@example.com',
        'n', '1', '', '', '1',
        'm',
    )

    program_managers.run()

    assert 'the room is free again' in capsys.readouterr().out
    assert svc.find_booking_by_id(booking.id).status == STATUS_CANCELLED
    assert [r.id for r in svc.get_available_rooms(hotel, '2024-06-10', '2024-06-12')] == [room.id]


def test_manager_completes_booking_and_marks_it_paid(db, answers, capsys):
    manager, _, room, guest = setup_lodge()
    booking = guest_booking(guest, room, created_by=manager)

    answers(
        'l', 'selam@example.com',
        'd', '1', '', '', '1',
        'p', '1', '', '', '1',
        'm',
    )

    program_managers.run()

    out = capsys.readouterr().out
    assert 'Booking for Abel completed.' in out
    assert 'Booking for Abel marked as paid.' in out

    saved = svc.find_booking_by_id(booking.id)
    assert saved.status == STATUS_COMPLETED
    assert saved.payment_status == PAYMENT_PAID


def test_manager_filters_bookings_by_date(db, answers, capsys):
    _, _, room, guest = setup_lodge()
    guest_booking(guest, room, '2024-06-10', '2024-06-12')
    guest_booking(guest, room, '2024-07-01', '2024-07-03')

    answers(
        'l', 'selam@example.com',
        'v', '1', '2024-07-01', '',
        'v', '1', '', '2024-06-12',
        'v', '1', '', '',
        'm',
    )

    program_managers.run()

    out = capsys.readouterr().out
    assert out.count('Blue Nile Lodge has 1 bookings.') == 2
    assert out.count('Blue Nile Lodge has 2 bookings.') == 1
    assert out.count('from 2024-07-01 for 2 nights') == 2
    assert out.count('from 2024-06-10 for 2 nights') == 2


def test_manager_closes_room_and_sees_its_stays(db, answers, capsys):
    manager, _, room, guest = setup_lodge()
    now = svc.now()
    current = guest_booking(guest, room, now - timedelta(days=1), now + timedelta(days=2),
                            created_by=manager)
    upcoming = guest_booking(guest, room, now + timedelta(days=10), now + timedelta(days=12),
                             created_by=manager)

    answers(
        'l', 'selam@example.com',
        't', '1', '1',
        'm',
    )

    program_managers.run()

    out = capsys.readouterr().out
    assert 'Room 101 is now closed.' in out
    assert f'Currently occupied until {current.check_out_date:%Y-%m-%d}.' in out
    assert f'Next stay starts {upcoming.check_in_date:%Y-%m-%d}.' in out
    assert svc.find_room_by_id(room.id).is_available is False


def test_manager_listing_counts_partial_nights(db, answers, capsys):
    _, _, room, guest = setup_lodge()
    booking = guest_booking(guest, room, '2024-06-10T12:00', '2024-06-11T13:00')
    assert booking.total_price == 200.0

    answers(
        'l', 'selam@example.com',
        'y',
        'm',
    )

    program_managers.run()

    assert '- 2024-06-10 for 2 nights, pending' in capsys.readouterr().out


def test_guest_sees_bookings_of_removed_hotel(db, answers, capsys):
    _, hotel, room, guest = setup_lodge()
    booking = guest_booking(guest, room)
    svc.cancel_booking(booking)
    svc.remove_hotel(hotel)

    answers(
        'l', 'abel@example.com',
        'v',
        'm',
    )

    program_guests.run()

    out = capsys.readouterr().out
    assert 'You have 1 bookings.' in out
    assert 'A removed hotel from 2024-06-10 for 2 nights' in out
