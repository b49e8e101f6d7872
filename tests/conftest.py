import threading
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient

import whoop
from config import SESSIONS
from main import app


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self.body = body if body is not None else {}

    @property
    def ok(self):
        return self.status_code < 400

    @property
    def text(self):
        return str(self.body)

    def json(self):
        if isinstance(self.body, str):
            raise ValueError("not JSON")
        return self.body


class FakeWhoop:
    """Stands in for requests.post/get as used by the whoop module."""

    def __init__(self):
        self.token_response = FakeResponse(200, {
            "access_token": "abc",
            "refresh_token": "refresh-abc",
            "token_type": "bearer",
            "expires_in": 3600,
            "scope": whoop.SCOPES,
        })
        self.resources = {
            whoop.PROFILE_PATH: FakeResponse(200, {"first_name": "Ada"}),
            whoop.RECOVERY_PATH: FakeResponse(200, {"records": ["recovery-data"]}),
            whoop.SLEEP_PATH: FakeResponse(200, {"records": ["sleep-data"]}),
            whoop.WORKOUT_PATH: FakeResponse(200, {"records": ["workout-data"]}),
        }
        self.post_error = None
        self.get_hook = None
        self.posts = []
        self.gets = []
        self._lock = threading.Lock()

    def post(self, url, data=None, timeout=None, **kwargs):
        self.posts.append({"url": url, "data": data, "timeout": timeout})
        if self.post_error is not None:
            raise self.post_error
        return self.token_response

    def get(self, url, headers=None, timeout=None, **kwargs):
        with self._lock:
            self.gets.append({"url": url, "headers": headers, "timeout": timeout})
        path = url[len(whoop.API_BASE_URL):]
        if self.get_hook is not None:
            self.get_hook(path)
        return self.resources[path]

    @property
    def calls(self):
        return len(self.posts) + len(self.gets)


@pytest.fixture(autouse=True)
def whoop_env(monkeypatch):
    monkeypatch.setenv("WHOOP_CLIENT_ID", "client-123")
    monkeypatch.setenv("WHOOP_CLIENT_SECRET", "secret-456")
    monkeypatch.setenv("WHOOP_REDIRECT_URI", "http://localhost:3001/auth/whoop/callback")


@pytest.fixture(autouse=True)
def clear_sessions():
    SESSIONS.clear()
    yield
    SESSIONS.clear()


@pytest.fixture
def fake_whoop(monkeypatch):
    fake = FakeWhoop()
    monkeypatch.setattr(whoop.requests, "post", fake.post)
    monkeypatch.setattr(whoop.requests, "get", fake.get)
    return fake


@pytest.fixture
def client():
    return TestClient(app)


def start_login(client):
    """Hit /auth/whoop and return the state WHOOP would echo back."""
    resp = client.get("/auth/whoop", follow_redirects=False)
    assert resp.status_code == 302
    query = parse_qs(urlparse(resp.headers["location"]).query)
    return query["state"][0]


def login(client, code="the-code"):
    state = start_login(client)
    return client.get(
        "/auth/whoop/callback",
        params={"code": code, "state": state},
        follow_redirects=False,
    )


@pytest.fixture
def logged_in_client(client, fake_whoop):
    resp = login(client)
    assert resp.status_code == 302
    return client
