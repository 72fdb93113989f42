"""
CRUD operations for User model.
"""

import logging
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ledger_api.core.exceptions import DuplicateUsername
from ledger_api.core.security import get_password_hash
from ledger_api.models.user import User

logger = logging.getLogger(__name__)


def get_by_username(db: Session, username: str) -> List[User]:
    """
    Retrieve every user row matching a username.

    Returns a list so callers can insist on exactly one match.
    """
    return db.query(User).filter(User.username == username).all()


def get_multi(db: Session, skip: int = 0, limit: int = 100) -> List[User]:
    return db.query(User).order_by(User.id).offset(skip).limit(limit).all()


def create(db: Session, username: str, password: str, tasks: Optional[str] = None) -> User:
    """
    Create a user with a bcrypt-hashed password.

    The pre-check gives the common case a clear error; the unique index on
    username catches concurrent creates that both pass it.

    Raises:
        DuplicateUsername: If the username is already taken
    """
    if get_by_username(db, username):
        raise DuplicateUsername()

    db_user = User(
        username=username,
        password_hash=get_password_hash(password),
        tasks=tasks or "",
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Concurrent create for username {username} rejected by unique index")
        raise DuplicateUsername()

    db.refresh(db_user)
    return db_user


def update_tasks(db: Session, user_id: int, tasks: Optional[str]) -> bool:
    """
    Replace the task list of a user.

    Returns:
        False if no user has this id
    """
    updated = (
        db.query(User)
        .filter(User.id == user_id)
        .update({User.tasks: tasks or ""}, synchronize_session=False)
    )
    db.commit()
    return updated > 0


def delete(db: Session, user_id: int) -> bool:
    """
    Permanently delete a user.

    Returns:
        False if no user has this id
    """
    deleted = db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
    db.commit()
    return deleted > 0
