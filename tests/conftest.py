import json
from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.cart import CartStore
from app.main import create_app
from app.upstream import UpstreamClient

UPSTREAM = "https://upstream.test"


class FakeUpstream:
    """Routes upstream calls to per-path responders and records every request."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes = {}

    def on(self, method: str, path: str, responder: Callable[[httpx.Request], httpx.Response]):
        self.routes[(method, path)] = responder

    def json(self, method: str, path: str, status_code: int, body):
        self.on(method, path, lambda request: httpx.Response(status_code, json=body))

    def fail(self, method: str, path: str, message: str = "connection refused"):
        def responder(request):
            raise httpx.ConnectError(message, request=request)
        self.on(method, path, responder)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self.routes.get((request.method, request.url.path))
        if responder is None:
            return httpx.Response(404, json={"message": "no stub"})
        return responder(request)

    def calls(self, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def body(self, request: httpx.Request):
        return json.loads(request.content)


def make_token(user_id=1, **extra) -> str:
    claims = {"user": {"id": user_id, "username": "testuser"}}
    claims.update(extra)
    return jwt.encode(claims, "not-checked", algorithm="HS256")


@pytest.fixture
def fake_upstream():
    return FakeUpstream()


@pytest.fixture
def cart_store():
    return CartStore()


@pytest.fixture
def client(fake_upstream, cart_store):
    upstream = UpstreamClient.create(
        base_url=UPSTREAM,
        transport=httpx.MockTransport(fake_upstream.handler),
    )
    app = create_app(upstream=upstream, cart_store=cart_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(fake_upstream):
    """Valid bearer header for user 1; upstream /auth/me accepts it."""
    fake_upstream.json("GET", "/auth/me", 200, {"id": 1, "username": "testuser"})
    return {"Authorization": f"Bearer {make_token(1)}"}
