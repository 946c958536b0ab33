"""Cart package: models, snapshot storage, and the cart store."""
from .models import CartItem
from .service import CartStore
from .storage import CartSnapshotStorage

__all__ = [
    "CartItem",
    "CartSnapshotStorage",
    "CartStore",
]
