"""Durable snapshot storage for the cart."""
from typing import List

from krisha.db import DurableKeyValueStore, StorageKeys
from krisha.errors import ERROR_CORRUPT_CART
from krisha.logging import get_logger, sanitize_id_for_logging

from .models import CartItem, deserialize_items, serialize_items

logger = get_logger(__name__)


class CartSnapshotStorage:
    """
    Reads and writes the cart line list under a single key.

    Reading never fails: a missing value is an empty cart, and a corrupted
    value is deleted and treated as missing. Writes are last-write-wins and
    never raise; a failed write is logged and the caller carries on.
    """

    def __init__(self, store: DurableKeyValueStore, key: str = StorageKeys.CART):
        self.store = store
        self.key = key

    def load(self) -> List[CartItem]:
        try:
            raw = self.store.get(self.key)
        except Exception as e:
            logger.error("Failed to read cart from storage: %s", type(e).__name__, exc_info=True)
            return []

        if not raw:
            return []

        try:
            items = deserialize_items(raw)
        except ValueError as e:
            logger.warning("%s under %s: %s", ERROR_CORRUPT_CART, self.key, e)
            self._discard()
            return []

        return _normalize(items)

    def save(self, items: List[CartItem]) -> bool:
        try:
            self.store.set(self.key, serialize_items(items))
            return True
        except Exception as e:
            logger.error("Failed to write cart to storage: %s", type(e).__name__, exc_info=True)
            return False

    def _discard(self) -> None:
        try:
            self.store.delete(self.key)
        except Exception as e:
            logger.error("Failed to delete corrupted cart: %s", type(e).__name__, exc_info=True)


def _normalize(items: List[CartItem]) -> List[CartItem]:
    """Restore line invariants on records written by older or foreign code."""
    seen = set()
    result = []
    for item in items:
        if item.product_id in seen or item.stock < 1:
            logger.warning("Dropping stored cart line %s", sanitize_id_for_logging(item.product_id))
            continue
        seen.add(item.product_id)
        item.quantity = max(1, min(item.quantity, item.stock))
        result.append(item)
    return result
