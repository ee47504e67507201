"""HTTP client for the flixauth backend."""
from __future__ import annotations

from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from flixauth_client.config import BACKEND_BASE_URL, GET_RETRIES, REQUEST_TIMEOUT, TOKEN_FILE
from flixauth_client.session import AuthSession, DisplayUser
from flixauth_client.storage import FileTokenStorage, TokenStorage


class APIError(requests.HTTPError):
    """A non-2xx answer from the backend, carrying the server's error message."""

    def __init__(self, message: str, status_code: int | None = None, response: requests.Response | None = None) -> None:
        super().__init__(message, response=response)
        self.message = message
        self.status_code = status_code


class APIClient:
    def __init__(
        self,
        session: AuthSession | None = None,
        base_url: str = BACKEND_BASE_URL,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or AuthSession()
        self.http = requests.Session()
        # Only idempotent GETs are retried, and only on transient server errors.
        retry = Retry(
            total=GET_RETRIES,
            backoff_factor=0.3,
            status_forcelist=(500, 502, 503, 504),
            allowed_methods=frozenset({"GET"}),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        self.http.mount("http://", adapter)
        self.http.mount("https://", adapter)
        self.http.headers["Content-Type"] = "application/json"
        if self.session.token:
            self._attach_token(self.session.token)

    # -------------------- Auth --------------------
    def register(
        self,
        user_id: str,
        username: str,
        email: str,
        password: str,
        phone_number: str | None = None,
    ) -> Dict[str, Any]:
        payload = {
            "userId": user_id,
            "username": username,
            "email": email,
            "phoneNumber": phone_number,
            "password": password,
        }
        res = self._post("/register", json=payload, fallback="Registration failed")
        self._store_token(res.get("token"))
        return res

    def login(self, username: str, password: str) -> Dict[str, Any]:
        payload = {"username": username, "password": password}
        res = self._post("/login", json=payload, fallback="Login failed")
        self._store_token(res.get("token"))
        return res

    def logout(self) -> None:
        self.session.clear()
        self.http.headers.pop("Authorization", None)

    def get_profile(self) -> Dict[str, Any]:
        return self._get("/profile", fallback="Failed to fetch profile")

    def test_database(self) -> Dict[str, Any]:
        return self._get("/test-db", fallback="Database test failed")

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated

    def current_user(self) -> Optional[DisplayUser]:
        return self.session.current_user()

    # -------------------- Internal helpers --------------------
    def _attach_token(self, token: str) -> None:
        self.http.headers["Authorization"] = f"Bearer {token}"

    def _store_token(self, token: str | None) -> None:
        if not token:
            raise APIError("Backend response carried no token")
        self.session.set_token(token)
        self._attach_token(token)

    def _post(self, path: str, json: Dict[str, Any] | None = None, fallback: str = "Request failed") -> Dict[str, Any]:
        return self._send("POST", path, fallback, json=json or {})

    def _get(self, path: str, params: Dict[str, Any] | None = None, fallback: str = "Request failed") -> Dict[str, Any]:
        return self._send("GET", path, fallback, params=params or {})

    def _send(self, method: str, path: str, fallback: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            res = self.http.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            # Backend unreachable, timed out, or GET retries exhausted.
            raise APIError(fallback) from exc
        return self._handle(res, fallback)

    @staticmethod
    def _handle(res: requests.Response, fallback: str) -> Dict[str, Any]:
        if res.ok:
            try:
                return res.json() if res.text else {}
            except ValueError as exc:
                raise APIError(fallback, status_code=res.status_code, response=res) from exc
        try:
            body = res.json()
        except ValueError:
            body = None
        message = body.get("error") if isinstance(body, dict) else None
        raise APIError(message or fallback, status_code=res.status_code, response=res)


def get_client(base_url: str | None = None, storage: TokenStorage | None = None) -> APIClient:
    session = AuthSession(storage or FileTokenStorage(TOKEN_FILE))
    return APIClient(session=session, base_url=base_url or BACKEND_BASE_URL)
