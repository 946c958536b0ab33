"""Wishlist package: wire models, remote API, and the wishlist store."""
from .api import HttpWishlistAPI, RemoteWishlistAPI
from .models import Product, WishlistEntry, WishlistOutcome
from .service import WishlistStore

__all__ = [
    "HttpWishlistAPI",
    "Product",
    "RemoteWishlistAPI",
    "WishlistEntry",
    "WishlistOutcome",
    "WishlistStore",
]
