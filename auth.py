"""
auth.py — Team sign-in for a SiteScan session

The signed-in name is what the store records as `created_by`. When
AUTH_PASSWORD is configured the shared team password is required.
"""

import hmac
import logging
from typing import MutableMapping, Optional

from errors import ValidationError
from settings import AUTH_PASSWORD

logger = logging.getLogger(__name__)

USER_KEY = "auth_user"
CONN_KEY = "db_conn"


def current_user(state: MutableMapping) -> Optional[str]:
    return state.get(USER_KEY)


def login(state: MutableMapping, name: str, password: str = "", expected: Optional[str] = AUTH_PASSWORD) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Please enter your name")
    if expected and not hmac.compare_digest(password or "", expected):
        raise ValidationError("Incorrect team password")
    state[USER_KEY] = name
    logger.info("%s signed in", name)
    return name


def logout(state: MutableMapping) -> None:
    """End the session: forget the user and every per-session entry."""
    user = state.get(USER_KEY)
    conn = state.get(CONN_KEY)
    if conn is not None:
        conn.close()
    for key in list(state.keys()):
        del state[key]
    logger.info("%s signed out", user)
