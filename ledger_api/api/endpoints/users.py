"""
User account endpoints.

- POST /api/create-user: create an account
- PUT /api/edit-user/{user_id}: replace the account's task list
- DELETE /api/delete-user/{user_id}: delete an account
- GET /api/users: list accounts (no password hashes)
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ledger_api.core.database import get_db
from ledger_api.core.deps import require_token
from ledger_api.core.exceptions import APIError, InternalError, MissingParameter, NotFound
from ledger_api.crud import user as user_crud
from ledger_api.schemas.user import MessageResponse, UserCreateRequest, UserEditRequest, UserResponse

router = APIRouter(prefix="/api", tags=["Users"], dependencies=[Depends(require_token)])
logger = logging.getLogger(__name__)


@router.post("/create-user", status_code=status.HTTP_201_CREATED, response_model=MessageResponse)
def create_user(request: UserCreateRequest, db: Session = Depends(get_db)):
    if not request.username or not request.password:
        raise MissingParameter("Username and password are required")

    try:
        user = user_crud.create(db, request.username, request.password, request.tasks)
    except APIError:
        raise
    except Exception as e:
        logger.exception(f"Error creating user: {e}")
        raise InternalError()

    logger.info(f"User created: {user.username} (id: {user.id})")
    return {"message": "User created successfully"}


@router.put("/edit-user/{user_id}", response_model=MessageResponse)
def edit_user(user_id: int, request: UserEditRequest, db: Session = Depends(get_db)):
    """Replace the user's tasks; a missing value clears them."""
    try:
        updated = user_crud.update_tasks(db, user_id, request.tasks)
    except Exception as e:
        logger.exception(f"Error updating user {user_id}: {e}")
        raise InternalError()

    if not updated:
        raise NotFound("User not found")

    logger.info(f"User {user_id} tasks updated")
    return {"message": "User updated successfully"}


@router.delete("/delete-user/{user_id}", response_model=MessageResponse)
def delete_user(user_id: int, db: Session = Depends(get_db)):
    try:
        deleted = user_crud.delete(db, user_id)
    except Exception as e:
        logger.exception(f"Error deleting user {user_id}: {e}")
        raise InternalError()

    if not deleted:
        raise NotFound("User not found")

    logger.info(f"User {user_id} deleted")
    return {"message": "User deleted successfully"}


@router.get("/users", response_model=List[UserResponse])
def list_users(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    """List user accounts without password hashes."""
    return user_crud.get_multi(db, skip=skip, limit=limit)
