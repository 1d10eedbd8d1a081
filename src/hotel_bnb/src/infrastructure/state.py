"""Process-wide account state.

Exposes:
- active_account: Optional[User] - the logged-in user (or None).
- reload_account(): Refresh active_account from the database using its email.
"""

from typing import Optional

from data.users import User
import services.data_service as svc

# None means nobody is logged in.
active_account: Optional[User] = None


def reload_account():
    global active_account
    if not active_account:
        return

    # None if the account was removed in the meantime.
    active_account = svc.find_account_by_email(active_account.email)
