"""Pytest configuration and fixtures"""
import asyncio
import os
from typing import Dict, List, Optional

import pytest

from krisha.auth.session import AuthSession
from krisha.db import MemoryKeyValueStore
from krisha.errors import WishlistAPIError
from krisha.wishlist.models import WishlistEntry

# Keep test runs independent of a developer's local configuration
os.environ.setdefault("KRISHA_STORAGE_BACKEND", "memory")
os.environ.setdefault("KRISHA_API_URL", "http://storefront.test")


def make_entry(product_id: str, user_id: str = "user-1", name: Optional[str] = None) -> WishlistEntry:
    """Build a wishlist entry as the API would return it."""
    return WishlistEntry.model_validate({
        "id": f"wl-{user_id}-{product_id}",
        "userId": user_id,
        "productId": product_id,
        "product": {
            "id": product_id,
            "name": name or f"Product {product_id}",
            "description": "Handwoven",
            "price": "1200.00",
            "image": f"https://cdn.test/{product_id}.jpg",
            "stock": 4,
            "categoryId": "cat-1",
            "isActive": True,
        },
    })


async def settle(rounds: int = 10) -> None:
    """Let pending tasks and callbacks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class FakeWishlistAPI:
    """
    In-memory wishlist authority keyed by session token.

    list() resolves for the token active when it was called; hold(token)
    makes those responses wait until the returned event is set.
    """

    def __init__(self, session: AuthSession):
        self.session = session
        self.entries: Dict[str, List[WishlistEntry]] = {}
        self.gates: Dict[str, asyncio.Event] = {}
        self.list_calls: List[Optional[str]] = []
        self.add_calls: List[str] = []
        self.remove_calls: List[str] = []
        self.fail_list = False
        self.fail_add = False
        self.fail_remove = False

    def hold(self, token: str) -> asyncio.Event:
        gate = asyncio.Event()
        self.gates[token] = gate
        return gate

    async def list(self) -> List[WishlistEntry]:
        token = self.session.token
        self.list_calls.append(token)
        gate = self.gates.get(token)
        if gate is not None:
            await gate.wait()
        if self.fail_list:
            raise WishlistAPIError(status_code=500)
        return list(self.entries.get(token, []))

    async def add(self, product_id: str) -> None:
        self.add_calls.append(product_id)
        if self.fail_add:
            raise WishlistAPIError(status_code=500)
        token = self.session.token
        entries = self.entries.setdefault(token, [])
        if not any(e.product_id == product_id for e in entries):
            entries.append(make_entry(product_id, user_id=f"user-{token}"))

    async def remove(self, product_id: str) -> None:
        self.remove_calls.append(product_id)
        if self.fail_remove:
            raise WishlistAPIError(status_code=500)
        token = self.session.token
        self.entries[token] = [e for e in self.entries.get(token, []) if e.product_id != product_id]


@pytest.fixture
def memory_store():
    """Empty durable store"""
    return MemoryKeyValueStore()


@pytest.fixture
def session():
    """Logged-out session"""
    return AuthSession()


@pytest.fixture
def fake_api(session):
    """Wishlist authority bound to the session fixture"""
    return FakeWishlistAPI(session)


@pytest.fixture
def sample_product():
    """Sample catalog product as passed to the cart"""
    return {
        "product_id": "prod-123",
        "name": "Pashmina Shawl",
        "price": "1200.50",
        "image": "https://cdn.test/prod-123.jpg",
        "stock": 3,
    }


@pytest.fixture
def second_product():
    """Another product with plenty of stock"""
    return {
        "product_id": "prod-456",
        "name": "Singing Bowl",
        "price": "2500",
        "image": "https://cdn.test/prod-456.jpg",
        "stock": 10,
    }
