"""User schema definitions.

This module defines the authenticated principal and the auth request and
response bodies.
"""

from datetime import datetime
from typing import Literal, Optional

import pytz
from pydantic import Field

from schemas.common import CamelModel

UserRole = Literal["student", "teacher", "TA"]


class User(CamelModel):
    """A registered user; doubles as the request principal."""

    user_id: str = Field(description="The unique identifier for the user.")
    name: str = Field(description="Display name snapshotted onto classes and questions.")
    email: str
    role: UserRole
    password_hash: Optional[str] = Field(default=None, exclude=True)
    created_at: str = Field(
        default_factory=lambda: datetime.now(pytz.utc).isoformat()
    )


class UserInfo(CamelModel):
    """Public view of a user, never carries the password hash."""

    id: str
    name: str
    email: str
    role: UserRole
    created_at: str


class RegisterRequest(CamelModel):
    name: str
    email: str
    password: str
    role: UserRole = "student"


class LoginRequest(CamelModel):
    email: str
    password: str


class AuthResponse(CamelModel):
    token: str
    user: UserInfo


class CurrentUserResponse(CamelModel):
    user: UserInfo
