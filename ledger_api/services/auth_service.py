"""
Username/password sign-in.
"""

import logging
from sqlalchemy.orm import Session

from ledger_api.core.exceptions import InvalidCredentials, MissingParameter
from ledger_api.core.security import create_access_token, verify_password
from ledger_api.crud import user as user_crud

logger = logging.getLogger(__name__)


def sign_in(db: Session, username: str, password: str) -> str:
    """
    Check credentials and issue a signed token carrying the username.

    Raises:
        MissingParameter: If username or password is empty
        InvalidCredentials: If the username does not match exactly one user
            or the password is wrong
    """
    if not username or not password:
        raise MissingParameter("Username and password are required")

    users = user_crud.get_by_username(db, username)
    if len(users) != 1 or not verify_password(password, users[0].password_hash):
        logger.warning(f"Failed sign-in for username {username}")
        raise InvalidCredentials()

    logger.info(f"User signed in: {username}")
    return create_access_token(data={"username": username})
