"""
Application entry point for Hotel BnB.

This module:
- Configures logging from HOTEL_BNB_LOG_LEVEL.
- Initializes the MongoEngine connection (via data.mongo_setup.global_init).
- Prints the application header.
- Loops asking whether the user is a guest or a hotel manager and dispatches
  to program_guests or program_managers.
"""

import logging
import os

from colorama import Fore, init as colorama_init
import program_guests
import program_managers
import data.mongo_setup as mongo_setup


def configure_logging():
    level = os.environ.get('HOTEL_BNB_LOG_LEVEL', 'WARNING').upper()
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, level, logging.WARNING)
    )


def main():
    configure_logging()
    colorama_init()
    mongo_setup.global_init()

    print_header()

    try:
        while True:
            if find_user_intent() == 'book':
                program_guests.run()
            else:
                program_managers.run()
    except KeyboardInterrupt:
        return


def print_header():
    print(Fore.WHITE + '****************  HOTEL BnB  ****************')
    print(Fore.CYAN + '      Rooms for every stay, night by night.')
    print(Fore.WHITE + '*********************************************')
    print()
    print("Welcome to Hotel BnB!")
    print("Why are you here?")
    print()

"""
Ask the user whether they are a guest or a hotel manager.

Returns:
    str: 'book' for guests or 'manage' for hotel managers.
"""
def find_user_intent():
    print("[g] Book a hotel room")
    print("[h] Manage your hotel")
    print()

    choice = input("Are you a [g]uest or [h]otel manager? ")

    # Anything but 'h' is a guest.
    if choice == 'h':
        return 'manage'

    return 'book'


if __name__ == '__main__':
    main()
