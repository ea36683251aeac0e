import json
import re
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from fastapi.testclient import TestClient

from expense_api.api.deps import get_google_client
from expense_api.core.config import Settings
from expense_api.core.google_auth import GOOGLE_TOKEN_URL, GOOGLE_USERINFO_URL, GoogleOAuthClient
from expense_api.main import create_app

API = "/api/v1"
STRONG_PASSWORD = "Valid1Pass!"


class FakeGoogle:
    """Stands in for Google's token and userinfo endpoints."""

    def __init__(self):
        self.token_status = 200
        self.profile_status = 200
        self.token_body = {"access_token": "google-access-token", "token_type": "Bearer"}
        self.profile = {"sub": "google-sub-1", "email": "new.user@acme.io", "name": "New User"}
        self.calls = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.calls.append(url)
        if url.startswith(GOOGLE_TOKEN_URL):
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error": "invalid_grant"})
            return httpx.Response(200, json=self.token_body)
        if url.startswith(GOOGLE_USERINFO_URL):
            if self.profile_status != 200:
                return httpx.Response(self.profile_status, json={"error": "unauthorized"})
            return httpx.Response(200, json=self.profile)
        return httpx.Response(404)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        SECRET_KEY="test-secret-key-with-enough-length",
        LOG_LEVEL="WARNING",
        FRONTEND_ORIGIN="http://localhost:5173",
        GOOGLE_CLIENT_ID="client-id",
        GOOGLE_CLIENT_SECRET="client-secret",
        GOOGLE_REDIRECT_URI="http://testserver/api/v1/auth/google/callback",
    )


@pytest.fixture
def fake_google():
    return FakeGoogle()


@pytest.fixture
def app(settings, fake_google):
    app = create_app(settings)
    transport = httpx.MockTransport(fake_google.handler)
    app.dependency_overrides[get_google_client] = lambda: GoogleOAuthClient.from_settings(settings, transport=transport)
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def signup(client, email="alice@acme.io", password=STRONG_PASSWORD, **extra):
    body = {
        "email": email,
        "password": password,
        "display_name": "Alice",
        "monthly_income": 50000,
        "currency": "INR",
    }
    body.update(extra)
    return client.post(f"{API}/auth/signup", json=body)


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def token(client):
    response = signup(client)
    assert response.status_code == 201, response.text
    return response.json()["token"]


@pytest.fixture
def headers(token):
    return auth_header(token)


def start_google(client, flow="login"):
    """Begin the popup flow and return the state Google would echo back."""
    response = client.get(f"{API}/auth/google/start", params={"flow": flow}, follow_redirects=False)
    assert response.status_code == 302
    return parse_qs(urlparse(response.headers["location"]).query)["state"][0]


def popup_payload(response):
    """Pull the object handed to window.opener.postMessage out of the result page."""
    match = re.search(r"var data = (.*?);\n", response.text)
    assert match, response.text
    return json.loads(match.group(1))
