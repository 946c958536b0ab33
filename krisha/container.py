"""
Application wiring.

Stores are built once at application start and handed to the UI layer;
there are no module-level singletons.

Usage:
    storefront = await create_storefront()
    storefront.cart.add_item(...)
    await storefront.wishlist.add(product_id)
    await storefront.close()
"""

from dataclasses import dataclass
from typing import Optional

from krisha.auth.session import AuthSession
from krisha.cart.service import CartStore
from krisha.config import Settings, get_settings
from krisha.db import DurableKeyValueStore, create_storage
from krisha.logging import get_logger
from krisha.wishlist.api import HttpWishlistAPI, RemoteWishlistAPI
from krisha.wishlist.service import WishlistStore

logger = get_logger(__name__)


@dataclass
class Storefront:
    """The client-side state of one browsing context."""

    settings: Settings
    storage: DurableKeyValueStore
    session: AuthSession
    cart: CartStore
    wishlist: WishlistStore
    api: RemoteWishlistAPI

    async def close(self) -> None:
        """Flush the cart, let in-flight loads settle, release the HTTP client."""
        self.cart.close()
        await self.wishlist.wait_idle()
        self.wishlist.close()
        if isinstance(self.api, HttpWishlistAPI):
            await self.api.close()
        logger.info("Storefront closed")


async def create_storefront(
    settings: Optional[Settings] = None,
    *,
    storage: Optional[DurableKeyValueStore] = None,
    api: Optional[RemoteWishlistAPI] = None,
) -> Storefront:
    """
    Build and hydrate the stores.

    The cart is restored from storage, the session token is restored, and
    the initial wishlist load is started (not awaited).

    Args:
        settings: Configuration, read from the environment when omitted
        storage: Durable store override (defaults to settings.storage_backend)
        api: Wishlist API override (defaults to HttpWishlistAPI)
    """
    settings = settings or get_settings()
    storage = storage if storage is not None else create_storage(settings)

    session = AuthSession(storage)
    cart = CartStore(storage)
    if api is None:
        api = HttpWishlistAPI(settings.api_url, session, timeout=settings.http_timeout)
    wishlist = WishlistStore(session, api)
    wishlist.start()

    logger.info(
        "Storefront ready: %d cart line(s), session %s",
        len(cart.items),
        "active" if session.is_authenticated else "none",
    )
    return Storefront(
        settings=settings,
        storage=storage,
        session=session,
        cart=cart,
        wishlist=wishlist,
        api=api,
    )
