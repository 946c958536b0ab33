"""
Wishlist Pydantic Models

Wire shapes returned by the storefront API (camelCase JSON).
"""
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class Product(_CamelModel):
    """Catalog snapshot embedded in a wishlist entry."""
    id: str
    name: str
    description: str = ""
    price: Decimal = Decimal("0")
    image: str = ""
    stock: int = 0
    category_id: str | None = None
    is_active: bool = True


class WishlistEntry(_CamelModel):
    id: str
    user_id: str
    product_id: str
    product: Product | None = None


class WishlistOutcome(str, Enum):
    """
    Result of a wishlist mutation.

    - added / removed: the remote call succeeded and the mirror changed
    - already_present / not_present: the remote call succeeded, nothing to change
    - no_session: nobody is logged in, no call was made
    - failed: the remote call (or the reload after it) failed
    - stale: the session changed while the call was in flight; result ignored
    """
    ADDED = "added"
    ALREADY_PRESENT = "already_present"
    REMOVED = "removed"
    NOT_PRESENT = "not_present"
    NO_SESSION = "no_session"
    FAILED = "failed"
    STALE = "stale"

    @property
    def succeeded(self) -> bool:
        return self in (
            WishlistOutcome.ADDED,
            WishlistOutcome.ALREADY_PRESENT,
            WishlistOutcome.REMOVED,
            WishlistOutcome.NOT_PRESENT,
        )
