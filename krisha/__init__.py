"""
Krisha storefront client engine.

Client-side purchase-intent state:
- cart: CartStore with stock ceilings and durable persistence
- wishlist: WishlistStore mirroring the remote wishlist per session
- auth: AuthSession token + change notification
- db: durable key-value backends
"""

from krisha.auth.session import AuthSession
from krisha.cart.service import CartStore
from krisha.container import Storefront, create_storefront
from krisha.wishlist.models import WishlistOutcome
from krisha.wishlist.service import WishlistStore

__all__ = [
    "AuthSession",
    "CartStore",
    "Storefront",
    "WishlistOutcome",
    "WishlistStore",
    "create_storefront",
]
