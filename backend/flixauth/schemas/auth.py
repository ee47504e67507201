"""Pydantic schemas for authentication flows."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

MAX_PASSWORD_LEN = 72  # bcrypt limit


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Required fields are checked by the service so that missing and empty values
# produce the same error message.
class UserCreate(CamelModel):
    user_id: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    password: Optional[str] = None


class UserLogin(CamelModel):
    username: Optional[str] = None
    password: Optional[str] = None


class UserOut(CamelModel):
    """Non-secret view of a user record."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    user_id: str
    username: str
    email: str
    phone_number: Optional[str] = None
    created_at: Optional[datetime] = None


class AuthResponse(CamelModel):
    message: str
    token: str
    user: UserOut


class ProfileResponse(CamelModel):
    user: UserOut


class SessionClaims(CamelModel):
    """Identity claims taken from a signature-verified session token."""

    user_id: str
    username: str
