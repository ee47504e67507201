import json
import os
import stat
from types import SimpleNamespace

import jwt
import pytest
import requests

from flixauth_client import api_client as api_client_module
from flixauth_client import state
from flixauth_client.api_client import APIClient, APIError, get_client
from flixauth_client.session import AuthSession, peek_claims
from flixauth_client.storage import FileTokenStorage, MemoryTokenStorage

TOKEN = jwt.encode({"userId": "u1", "username": "alice"}, "some-server-secret-0123456789-abcdef", algorithm="HS256")


def make_response(status_code, body=None, text=None):
    res = requests.Response()
    res.status_code = status_code
    res._content = (json.dumps(body) if body is not None else (text or "")).encode("utf-8")
    res.encoding = "utf-8"
    return res


class FakeTransport:
    """Stands in for ``requests.Session.request`` and records what was sent."""

    def __init__(self, http, *responses):
        self.http = http
        self.responses = list(responses)
        self.calls = []

    def __call__(self, method, url, **kwargs):
        self.calls.append(SimpleNamespace(method=method, url=url, headers=dict(self.http.headers), **kwargs))
        return self.responses.pop(0)


@pytest.fixture
def api():
    return APIClient(session=AuthSession(MemoryTokenStorage()), base_url="http://backend/api/")


def install(api, monkeypatch, *responses):
    transport = FakeTransport(api.http, *responses)
    monkeypatch.setattr(api.http, "request", transport)
    return transport


# -------------------- token storage --------------------
def test_file_storage_survives_new_instances(tmp_path):
    path = tmp_path / "nested" / "token.json"
    FileTokenStorage(path).save(TOKEN)
    assert FileTokenStorage(path).load() == TOKEN
    FileTokenStorage(path).clear()
    assert FileTokenStorage(path).load() is None
    assert not path.exists()


@pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")
def test_file_storage_creates_owner_only_file(tmp_path, monkeypatch):
    path = tmp_path / "token.json"
    path.write_text("{}")
    path.chmod(0o644)
    modes = []
    real_open = os.open

    def recording_open(file, flags, mode=0o777, *args, **kwargs):
        modes.append(mode)
        return real_open(file, flags, mode, *args, **kwargs)

    monkeypatch.setattr(os, "open", recording_open)
    FileTokenStorage(path).save(TOKEN)
    assert modes == [0o600]
    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_file_storage_ignores_corrupt_file(tmp_path):
    path = tmp_path / "token.json"
    path.write_text("{not json")
    assert FileTokenStorage(path).load() is None


def test_streamlit_storage_uses_session_state(monkeypatch):
    monkeypatch.setattr(state, "st", SimpleNamespace(session_state={}))
    storage = state.StreamlitTokenStorage()
    assert storage.load() is None
    storage.save(TOKEN)
    assert state.st.session_state[state.TOKEN_KEY] == TOKEN
    storage.clear()
    assert storage.load() is None


# -------------------- session --------------------
def test_session_reads_existing_token_from_storage():
    session = AuthSession(MemoryTokenStorage(TOKEN))
    assert session.token == TOKEN
    assert session.is_authenticated


def test_session_presence_check_ignores_expiry():
    expired = jwt.encode({"username": "alice", "exp": 1}, "another-secret-0123456789-abcdefghij", algorithm="HS256")
    assert AuthSession(MemoryTokenStorage(expired)).is_authenticated


def test_current_user_is_decoded_without_verification():
    user = AuthSession(MemoryTokenStorage(TOKEN)).current_user()
    assert user.username == "alice"
    assert user.user_id == "u1"


def test_current_user_for_missing_or_garbage_token():
    assert AuthSession().current_user() is None
    assert AuthSession(MemoryTokenStorage("garbage")).current_user() is None
    assert peek_claims("a.b.c") is None


def test_clear_empties_memory_and_storage():
    storage = MemoryTokenStorage(TOKEN)
    session = AuthSession(storage)
    session.clear()
    assert session.token is None
    assert storage.load() is None
    assert not session.is_authenticated


# -------------------- api client --------------------
def test_login_stores_token_and_attaches_bearer(api, monkeypatch):
    transport = install(
        api,
        monkeypatch,
        make_response(200, {"message": "Login successful", "token": TOKEN, "user": {"username": "alice"}}),
        make_response(200, {"user": {"username": "alice"}}),
    )
    api.login("alice", "secret1")
    assert api.session.storage.load() == TOKEN
    assert api.is_authenticated

    profile = api.get_profile()
    assert profile["user"]["username"] == "alice"
    login_call, profile_call = transport.calls
    assert login_call.method == "POST"
    assert login_call.url == "http://backend/api/login"
    assert login_call.json == {"username": "alice", "password": "secret1"}
    assert "Authorization" not in login_call.headers
    assert profile_call.method == "GET"
    assert profile_call.headers["Authorization"] == f"Bearer {TOKEN}"


def test_register_sends_camel_case_payload(api, monkeypatch):
    transport = install(api, monkeypatch, make_response(201, {"token": TOKEN, "user": {}}))
    api.register("u1", "alice", "a@x.com", "secret1", phone_number="555")
    assert transport.calls[0].json == {
        "userId": "u1",
        "username": "alice",
        "email": "a@x.com",
        "phoneNumber": "555",
        "password": "secret1",
    }
    assert api.session.token == TOKEN


def test_server_error_message_is_raised(api, monkeypatch):
    install(api, monkeypatch, make_response(401, {"error": "Invalid credentials"}))
    with pytest.raises(APIError) as excinfo:
        api.login("alice", "wrong")
    assert excinfo.value.message == "Invalid credentials"
    assert excinfo.value.status_code == 401
    assert not api.is_authenticated


def test_fallback_message_when_body_is_not_json(api, monkeypatch):
    install(api, monkeypatch, make_response(502, text="<html>bad gateway</html>"))
    with pytest.raises(APIError) as excinfo:
        api.login("alice", "secret1")
    assert excinfo.value.message == "Login failed"


def test_logout_clears_token_and_header(api, monkeypatch):
    install(api, monkeypatch, make_response(200, {"token": TOKEN, "user": {}}))
    api.login("alice", "secret1")
    api.logout()
    assert not api.is_authenticated
    assert "Authorization" not in api.http.headers
    assert api.current_user() is None


def test_client_with_stored_token_attaches_it_immediately():
    api = APIClient(session=AuthSession(MemoryTokenStorage(TOKEN)), base_url="http://backend/api")
    assert api.http.headers["Authorization"] == f"Bearer {TOKEN}"


def test_only_gets_are_retried(api):
    retry = api.http.get_adapter("http://backend/api/profile").max_retries
    assert retry.allowed_methods == frozenset({"GET"})
    assert 500 in retry.status_forcelist
    assert retry.is_retry("GET", 503)
    assert not retry.is_retry("POST", 503)


@pytest.mark.parametrize("failure", [requests.ConnectionError("connection refused"), requests.Timeout("timed out")])
def test_transport_failure_raises_fallback_api_error(api, monkeypatch, failure):
    def unreachable(method, url, **kwargs):
        raise failure

    monkeypatch.setattr(api.http, "request", unreachable)
    with pytest.raises(APIError) as excinfo:
        api.test_database()
    assert excinfo.value.message == "Database test failed"
    assert excinfo.value.status_code is None
    assert excinfo.value.__cause__ is failure


def test_success_with_non_json_body_raises_api_error(api, monkeypatch):
    install(api, monkeypatch, make_response(200, text="<html>maintenance</html>"))
    with pytest.raises(APIError) as excinfo:
        api.get_profile()
    assert excinfo.value.message == "Failed to fetch profile"
    assert excinfo.value.status_code == 200


def test_get_client_defaults_to_durable_file_storage(tmp_path, monkeypatch):
    path = tmp_path / "token.json"
    FileTokenStorage(path).save(TOKEN)
    monkeypatch.setattr(api_client_module, "TOKEN_FILE", path)

    client = get_client(base_url="http://backend/api")
    assert isinstance(client.session.storage, FileTokenStorage)
    assert client.session.storage.path == path
    assert client.is_authenticated
    assert client.http.headers["Authorization"] == f"Bearer {TOKEN}"


def test_get_client_accepts_injected_storage():
    client = get_client(base_url="http://backend/api", storage=MemoryTokenStorage())
    assert isinstance(client.session.storage, MemoryTokenStorage)
    assert client.base_url == "http://backend/api"
