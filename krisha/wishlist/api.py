"""
Remote wishlist API.

RemoteWishlistAPI is what WishlistStore depends on; HttpWishlistAPI talks to
the storefront REST routes:

    GET    /api/wishlist              -> {"data": [entry, ...]}
    POST   /api/wishlist              {"productId": "..."}
    DELETE /api/wishlist/{productId}

Both add and remove are idempotent on the server side.
"""
from typing import List, Optional, Protocol
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from krisha.auth.session import AuthSession
from krisha.config import DEFAULT_HTTP_TIMEOUT
from krisha.errors import (
    ERROR_NO_SESSION,
    ERROR_WISHLIST_BAD_RESPONSE,
    ERROR_WISHLIST_UNAVAILABLE,
    WishlistAPIError,
)
from krisha.logging import get_logger

from .models import WishlistEntry

logger = get_logger(__name__)

WISHLIST_PATH = "/api/wishlist"


class RemoteWishlistAPI(Protocol):
    """Authority for wishlist membership of the active session."""

    async def list(self) -> List[WishlistEntry]: ...

    async def add(self, product_id: str) -> None: ...

    async def remove(self, product_id: str) -> None: ...


class HttpWishlistAPI:
    """
    httpx client for the wishlist routes.

    The bearer token is read from the session on every request so a login
    or refresh applies to the next call. Every failure (transport, HTTP
    status, malformed body) surfaces as WishlistAPIError.
    """

    def __init__(
        self,
        base_url: str,
        session: AuthSession,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.timeout = timeout
        self._transport = transport
        self._http_client: Optional[httpx.AsyncClient] = None

    def _get_http_client(self) -> httpx.AsyncClient:
        """Lazily create the shared client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout, connect=5.0),
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
                transport=self._transport,
            )
        return self._http_client

    def _headers(self) -> dict:
        token = self.session.token
        if not token:
            raise WishlistAPIError(ERROR_NO_SESSION, status_code=401)
        return {"Authorization": f"Bearer {token}"}

    async def _request(self, method: str, path: str, json: Optional[dict] = None) -> httpx.Response:
        client = self._get_http_client()
        try:
            response = await client.request(method, path, json=json, headers=self._headers())
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning("Wishlist %s %s returned %s", method, path, e.response.status_code)
            raise WishlistAPIError(ERROR_WISHLIST_UNAVAILABLE, status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            logger.warning("Wishlist %s %s failed: %s", method, path, type(e).__name__)
            raise WishlistAPIError(ERROR_WISHLIST_UNAVAILABLE) from e
        return response

    async def list(self) -> List[WishlistEntry]:
        response = await self._request("GET", WISHLIST_PATH)
        try:
            body = response.json()
            data = body.get("data") if isinstance(body, dict) else body
            if data is None:
                data = []
            if not isinstance(data, list):
                raise ValueError("data is not a list")
            return [WishlistEntry.model_validate(item) for item in data]
        except (ValueError, ValidationError) as e:
            logger.warning("%s: %s", ERROR_WISHLIST_BAD_RESPONSE, type(e).__name__)
            raise WishlistAPIError(ERROR_WISHLIST_BAD_RESPONSE, status_code=response.status_code) from e

    async def add(self, product_id: str) -> None:
        await self._request("POST", WISHLIST_PATH, json={"productId": product_id})

    async def remove(self, product_id: str) -> None:
        await self._request("DELETE", f"{WISHLIST_PATH}/{quote(product_id, safe='')}")

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
