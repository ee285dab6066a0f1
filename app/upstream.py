# app/upstream.py
import logging
from typing import Any, Dict, List, Optional

import httpx
from fastapi import Request
from pydantic import ValidationError

from .config import UPSTREAM_TIMEOUT, UPSTREAM_URL
from .errors import AuthError, UpstreamError
from .schemas import DummyError, DummyUser

logger = logging.getLogger(__name__)


class UpstreamClient:
    """Thin wrapper over the external product/auth API.

    One outbound request per call, no retries. Every method either returns the
    upstream payload or raises the matching ApiError subclass.
    """

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    @classmethod
    def create(
        cls,
        base_url: str = UPSTREAM_URL,
        timeout: Optional[float] = UPSTREAM_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "UpstreamClient":
        # timeout=None really means "wait forever" for httpx
        return cls(httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport))

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_products(self) -> List[Dict[str, Any]]:
        try:
            resp = await self._client.get("/products")
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamError(f"products request failed: {e!r}") from e

        if not resp.is_success:
            raise UpstreamError(f"products returned {resp.status_code}: {data!r}")

        products = data.get("products") if isinstance(data, dict) else None
        if not isinstance(products, list):
            raise UpstreamError("products payload has no 'products' list")
        return products

    async def login(self, credentials: Any) -> DummyUser:
        # body goes upstream as-is, we never look at username/password
        try:
            resp = await self._client.post("/auth/login", json=credentials)
        except httpx.HTTPError as e:
            logger.warning("Login request to upstream failed: %r", e)
            raise AuthError(str(e) or "Login request failed") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise AuthError("Invalid response from auth service") from e

        if not resp.is_success:
            try:
                error = DummyError.model_validate(data)
            except ValidationError:
                raise AuthError()
            raise AuthError(error.message)

        try:
            return DummyUser.model_validate(data)
        except ValidationError as e:
            logger.warning("Unexpected login payload from upstream: %s", e)
            raise AuthError("Invalid response from auth service") from e

    async def verify_credential(self, authorization: str) -> bool:
        """Ask upstream whether the credential is currently valid (GET /auth/me)."""
        try:
            resp = await self._client.get("/auth/me", headers={"Authorization": authorization})
        except UnicodeEncodeError:
            # header values must be ASCII on the wire, such a token cannot be valid
            logger.info("Rejecting non-ASCII Authorization header")
            return False
        except httpx.HTTPError as e:
            logger.warning("Token verification request failed: %r", e)
            return False
        return resp.is_success


def get_upstream(request: Request) -> UpstreamClient:
    return request.app.state.upstream
