"""
pytest configuration.

Puts the application source directory on sys.path (the app imports its
modules as top-level `data`, `services`, ...) and provides a MongoEngine
connection backed by mongomock.
"""
import sys
from pathlib import Path

import mongomock
import pytest

src_dir = str(Path(__file__).parent.parent / "src")
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

import data.mongo_setup as mongo_setup  # noqa: E402
from data.bookings import Booking  # noqa: E402
from data.hotels import Hotel  # noqa: E402
from data.rooms import Room  # noqa: E402
from data.users import User  # noqa: E402


@pytest.fixture(scope="session")
def mongo_connection():
    mongo_setup.global_init('hotel_bnb_test', mongo_client_class=mongomock.MongoClient)
    yield
    mongo_setup.global_close()


@pytest.fixture
def db(mongo_connection):
    yield
    for document in (User, Hotel, Room, Booking):
        document.drop_collection()
