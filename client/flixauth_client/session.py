"""Client-side session holding at most one bearer token."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import jwt

from flixauth_client.storage import MemoryTokenStorage, TokenStorage


@dataclass(frozen=True)
class DisplayUser:
    """Identity read from an UNVERIFIED token. For display only, never for authorization."""

    user_id: Optional[str]
    username: Optional[str]


def peek_claims(token: str) -> Optional[dict]:
    """Decode the claims portion of a JWT without checking signature or expiry."""
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.DecodeError:
        return None
    return claims if isinstance(claims, dict) else None


class AuthSession:
    def __init__(self, storage: TokenStorage | None = None) -> None:
        self.storage = storage or MemoryTokenStorage()
        self._token: Optional[str] = self.storage.load()

    @property
    def token(self) -> Optional[str]:
        return self._token or self.storage.load()

    def set_token(self, token: str) -> None:
        self._token = token
        self.storage.save(token)

    def clear(self) -> None:
        self._token = None
        self.storage.clear()

    @property
    def is_authenticated(self) -> bool:
        # Presence only; an expired token still counts until the server rejects it.
        return bool(self.token)

    def current_user(self) -> Optional[DisplayUser]:
        token = self.token
        if not token:
            return None
        claims = peek_claims(token)
        if claims is None:
            return None
        return DisplayUser(user_id=claims.get("userId"), username=claims.get("username"))
