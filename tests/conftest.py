"""Pytest fixtures: settings and an in-process fake of the payment provider."""

import json
from typing import Any, Optional
from urllib.parse import parse_qs

import httpx
import pytest
from fastapi.testclient import TestClient

from paysession.api_gateway.main import create_app
from paysession.shared.config import Settings

TOKEN_PATH = "/oauth/v2/token"
SESSIONS_PATH = "/api/v1/paymentsessions"


def _respond(body: Any) -> httpx.Response:
    if isinstance(body, httpx.Response):
        return body
    if isinstance(body, str):
        return httpx.Response(200, text=body)
    return httpx.Response(200, json=body)


class FakeProvider:
    """Answers token and session calls the way the provider does, recording each request."""

    def __init__(self):
        self.token_calls: list[httpx.Request] = []
        self.session_calls: list[httpx.Request] = []
        self.token_error: Optional[Exception] = None
        self.token_body: Any = None
        self.expires_in: Any = 3600
        self.session_error: Optional[Exception] = None
        self.session_body: Any = {
            "code": 0,
            "message": "success",
            "payments_session": {"payments_session_id": "abc123", "currency": "INR", "amount": "10.00"},
        }

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == TOKEN_PATH:
            self.token_calls.append(request)
            if self.token_error is not None:
                raise self.token_error
            if self.token_body is not None:
                return _respond(self.token_body)
            return httpx.Response(200, json={
                "access_token": f"tok-{len(self.token_calls)}",
                "api_domain": "https://www.zohoapis.in",
                "token_type": "Bearer",
                "expires_in": self.expires_in,
            })
        if request.url.path == SESSIONS_PATH:
            self.session_calls.append(request)
            if self.session_error is not None:
                raise self.session_error
            return _respond(self.session_body)
        return httpx.Response(404, json={"message": "not found"})

    def token_form(self, index: int = -1) -> dict[str, str]:
        form = parse_qs(self.token_calls[index].content.decode())
        return {k: v[0] for k, v in form.items()}

    def session_payload(self, index: int = -1) -> dict:
        return json.loads(self.session_calls[index].content)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        account_id="60001234",
        client_id="1000.CLIENT",
        client_secret="s3cret",
        refresh_token="1000.refresh",
        api_key="pub_key_123",
    )


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def transport(provider):
    return httpx.MockTransport(provider)


@pytest.fixture
def client(settings, transport):
    return TestClient(create_app(settings, transport=transport))
