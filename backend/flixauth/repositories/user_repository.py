"""Repository for user persistence and retrieval."""
from __future__ import annotations

import logging

from sqlalchemy import or_, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from flixauth.core.errors import ConflictError
from flixauth.models.user import User
from flixauth.schemas.auth import UserCreate

LOGGER = logging.getLogger(__name__)


class UserRepository:
    def create_user(self, db: Session, user_create: UserCreate, password_hash: str) -> User:
        user = User(
            user_id=user_create.user_id,
            username=user_create.username,
            email=user_create.email,
            phone_number=user_create.phone_number or None,
            password=password_hash,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError as exc:
            # A concurrent registration won the race for one of the unique keys.
            db.rollback()
            LOGGER.warning("Unique constraint rejected user=%s: %s", user_create.username, exc.orig)
            raise ConflictError() from exc
        db.refresh(user)
        return user

    def get_by_username(self, db: Session, username: str) -> User | None:
        return db.query(User).filter(User.username == username).first()

    def find_conflict(self, db: Session, user_id: str, username: str, email: str) -> User | None:
        return (
            db.query(User)
            .filter(or_(User.user_id == user_id, User.username == username, User.email == email))
            .first()
        )

    def ping(self, db: Session) -> None:
        db.execute(text("SELECT 1"))
