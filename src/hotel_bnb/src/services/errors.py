"""
Exceptions raised by the service layer.

The console programs catch HotelBnbError and show its message to the user;
anything else is a bug and propagates.
"""


class HotelBnbError(Exception):
    pass


class InvalidRange(HotelBnbError):
    def __init__(self, check_in, check_out):
        self.check_in = check_in
        self.check_out = check_out
        super().__init__(f'Check-out ({check_out}) must be after check-in ({check_in}).')


class RoomUnavailable(HotelBnbError):
    def __init__(self, room, check_in, check_out):
        self.room = room
        self.check_in = check_in
        self.check_out = check_out
        super().__init__(
            f'Room {room.room_number} is not available from {check_in:%Y-%m-%d} to {check_out:%Y-%m-%d}.')


class InvalidTransition(HotelBnbError):
    def __init__(self, booking, status):
        self.booking = booking
        self.status = status
        super().__init__(f'Cannot move booking {booking.id} from {booking.status} to {status}.')


class NotFound(HotelBnbError):
    pass


class ValidationError(HotelBnbError):
    pass
