"""
Pydantic schemas for user accounts and sign-in.

Required fields are declared Optional so that a missing value is reported
with the API's own 400 message instead of a generic validation error.
"""

from pydantic import BaseModel
from typing import Optional


class UserCreateRequest(BaseModel):
    """Request schema for account creation."""
    username: Optional[str] = None
    password: Optional[str] = None
    tasks: Optional[str] = None


class UserEditRequest(BaseModel):
    """Only the task list of an account can be edited."""
    tasks: Optional[str] = None


class SignInRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class TokenResponse(BaseModel):
    """Signed token returned on successful sign-in."""
    token: str
    username: str


class UserResponse(BaseModel):
    """User account without the password hash."""
    id: int
    username: str
    tasks: Optional[str]

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str
