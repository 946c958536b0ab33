"""
Common Error Constants

Centralized error messages shared by the stores and the wishlist client.
"""

# Cart errors
ERROR_PRODUCT_ID_REQUIRED = "product_id must be a non-empty string"
ERROR_INVALID_STOCK = "stock must be an integer"
ERROR_INVALID_QUANTITY = "quantity must be an integer"
ERROR_CORRUPT_CART = "Stored cart data is corrupted"

# Wishlist errors
ERROR_WISHLIST_UNAVAILABLE = "Wishlist service unavailable"
ERROR_WISHLIST_BAD_RESPONSE = "Unexpected wishlist response"
ERROR_NO_SESSION = "No active session"

# Storage errors
ERROR_REDIS_NOT_CONFIGURED = "UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set"
ERROR_UNKNOWN_BACKEND = "Unknown storage backend"


class WishlistAPIError(Exception):
    """Raised by a RemoteWishlistAPI when a call does not succeed."""

    def __init__(self, message: str = ERROR_WISHLIST_UNAVAILABLE, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message
