"""Authentication service handling registration, login and session verification."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from functools import cached_property

import jwt
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from flixauth.core.config import settings
from flixauth.core.errors import (
    AuthError,
    ConflictError,
    InvalidTokenError,
    MissingTokenError,
    NotFoundError,
    UnexpectedError,
    ValidationError,
)
from flixauth.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from flixauth.repositories.user_repository import UserRepository
from flixauth.schemas.auth import MAX_PASSWORD_LEN, SessionClaims, UserCreate, UserLogin, UserOut

LOGGER = logging.getLogger(__name__)


@dataclass
class AuthResult:
    message: str
    token: str
    user: UserOut


def _check_password_length(password: str) -> None:
    if len(password.encode("utf-8")) > MAX_PASSWORD_LEN:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_LEN} bytes")


class AuthService:
    def __init__(self, user_repository: UserRepository) -> None:
        self.user_repository = user_repository

    @cached_property
    def _dummy_hash(self) -> str:
        # Checked against on unknown usernames so both login failures cost one bcrypt round.
        return get_password_hash("not-a-real-password")

    def register(self, db: Session, user_create: UserCreate) -> AuthResult:
        required = (user_create.user_id, user_create.username, user_create.email, user_create.password)
        if not all(required):
            raise ValidationError("All required fields must be filled")
        _check_password_length(user_create.password)

        existing = self.user_repository.find_conflict(
            db, user_create.user_id, user_create.username, user_create.email
        )
        if existing:
            # Same message whichever key collided.
            LOGGER.info("Registration rejected, duplicate key for username=%s", user_create.username)
            raise ConflictError()

        password_hash = get_password_hash(user_create.password)
        user = self.user_repository.create_user(db, user_create, password_hash)
        LOGGER.info("Registered user id=%s username=%s", user.id, user.username)
        return AuthResult(
            message="User registered successfully",
            token=self.issue_access_token(user.user_id, user.username),
            user=UserOut.model_validate(user),
        )

    def login(self, db: Session, credentials: UserLogin) -> AuthResult:
        if not credentials.username or not credentials.password:
            raise ValidationError("Username and password are required")

        # Oversized passwords never match a stored hash and fail like any other mismatch.
        user = self.authenticate_user(db, credentials.username, credentials.password)
        if not user:
            LOGGER.info("Login failed for username=%s", credentials.username)
            raise AuthError("Invalid credentials")
        LOGGER.info("Login succeeded for username=%s", user.username)
        return AuthResult(
            message="Login successful",
            token=self.issue_access_token(user.user_id, user.username),
            user=UserOut.model_validate(user),
        )

    def authenticate_user(self, db: Session, username: str, password: str):
        user = self.user_repository.get_by_username(db, username)
        if user is None:
            verify_password(password, self._dummy_hash)
            return None
        if verify_password(password, user.password):
            return user
        return None

    def issue_access_token(self, user_id: str, username: str) -> str:
        expires_delta = timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
        return create_access_token(data={"userId": user_id, "username": username}, expires_delta=expires_delta)

    def verify_session(self, token: str | None) -> SessionClaims:
        """Check signature and expiry of a bearer token and return its identity claims.

        No database lookup happens here; claims are trusted once verified.
        """
        if not token:
            raise MissingTokenError()
        try:
            payload = decode_access_token(token)
        except jwt.PyJWTError as exc:
            LOGGER.info("Rejected session token: %s", exc)
            raise InvalidTokenError() from exc

        user_id = payload.get("userId")
        username = payload.get("username")
        if not isinstance(user_id, str) or not isinstance(username, str):
            raise InvalidTokenError()
        return SessionClaims(user_id=user_id, username=username)

    def get_profile(self, db: Session, claims: SessionClaims) -> UserOut:
        user = self.user_repository.get_by_username(db, claims.username)
        if user is None:
            raise NotFoundError("User not found")
        return UserOut.model_validate(user)

    def check_database(self, db: Session) -> None:
        try:
            self.user_repository.ping(db)
        except SQLAlchemyError as exc:
            LOGGER.error("Database test failed: %s", exc)
            raise UnexpectedError("Database connection failed") from exc
