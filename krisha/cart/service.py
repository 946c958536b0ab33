"""Cart store with durable local persistence."""
from decimal import Decimal
from typing import Callable, List, Optional

from krisha.db import DurableKeyValueStore, StorageKeys
from krisha.errors import (
    ERROR_INVALID_QUANTITY,
    ERROR_INVALID_STOCK,
    ERROR_PRODUCT_ID_REQUIRED,
)
from krisha.events import Listeners
from krisha.logging import get_logger, sanitize_id_for_logging
from krisha.money import format_money, parse_money, round_money, to_float

from .models import CartItem
from .storage import CartSnapshotStorage

logger = get_logger(__name__)


class CartStore:
    """
    Owns the ordered list of cart lines.

    Guarantees:
    - one line per product_id
    - 1 <= quantity <= stock on every line
    - after each mutation the full line list is written to durable storage

    Never touches the network and never suspends. Stock overflow and
    non-positive quantities are not errors: they are capped or treated as
    removal.

    Usage:
        cart = CartStore(FileKeyValueStore("~/.krisha/storage.json"))
        cart.add_item("p-1", "Pashmina Shawl", Decimal("1200"), stock=3)
        cart.get_total_price()
    """

    def __init__(self, store: DurableKeyValueStore, key: str = StorageKeys.CART):
        self._storage = CartSnapshotStorage(store, key)
        self._items: List[CartItem] = self._storage.load()
        self._is_open = False
        self._listeners = Listeners("cart")
        logger.debug("Cart hydrated with %d line(s)", len(self._items))

    # ==================== READ ====================

    @property
    def items(self) -> List[CartItem]:
        """Copies of the lines in insertion order."""
        return [item.copy() for item in self._items]

    def get_item(self, product_id: str) -> Optional[CartItem]:
        item = self._find(product_id)
        return item.copy() if item else None

    def get_total_items(self) -> int:
        return sum(item.quantity for item in self._items)

    def get_total_price(self) -> Decimal:
        return sum((item.total_price for item in self._items), Decimal("0"))

    def get_summary(self) -> dict:
        """
        Cart summary for display.

        Returns:
            Dictionary with lines, item count and totals (float and formatted)
        """
        total = self.get_total_price()
        return {
            "is_empty": not self._items,
            "total_items": self.get_total_items(),
            "items": [
                {
                    "product_id": item.product_id,
                    "name": item.name,
                    "quantity": item.quantity,
                    "stock": item.stock,
                    "unit_price": to_float(item.price),
                    "total": to_float(round_money(item.total_price)),
                }
                for item in self._items
            ],
            "total": to_float(round_money(total)),
            "total_display": format_money(total),
        }

    # ==================== PANEL ====================

    @property
    def is_open(self) -> bool:
        return self._is_open

    def set_open(self, open: bool) -> None:
        if self._is_open != bool(open):
            self._is_open = bool(open)
            self._listeners.emit(self)

    # ==================== MUTATIONS ====================

    def add_item(
        self,
        product_id: str,
        name: str,
        price,
        stock: int,
        image: str = "",
    ) -> None:
        """
        Add one unit of a product.

        An existing line grows by one only while below its stock; at the
        ceiling the call does nothing. The given stock replaces the stored
        one, clamping the line if the new ceiling is lower.

        Raises:
            ValueError: If product_id is empty, price is invalid, or stock is not an integer
        """
        if not product_id or not isinstance(product_id, str):
            raise ValueError(ERROR_PRODUCT_ID_REQUIRED)
        if isinstance(stock, bool) or not isinstance(stock, int):
            raise ValueError(ERROR_INVALID_STOCK)
        unit_price = parse_money(price)

        existing = self._find(product_id)
        if existing is None:
            if stock < 1:
                logger.debug("Out of stock, not adding %s", sanitize_id_for_logging(product_id))
            else:
                self._items.append(
                    CartItem(
                        product_id=product_id,
                        name=name,
                        price=unit_price,
                        image=image or "",
                        stock=stock,
                        quantity=1,
                    )
                )
        elif stock < 1:
            self._items.remove(existing)
        else:
            existing.stock = stock
            if existing.quantity < stock:
                existing.quantity += 1
            else:
                existing.quantity = stock

        self._commit()

    def remove_item(self, product_id: str) -> None:
        """Delete the line for product_id; absent ids are ignored."""
        self._items = [item for item in self._items if item.product_id != product_id]
        self._commit()

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """
        Set a line's quantity, clamped to its stock.

        Zero or negative quantity removes the line.

        Raises:
            ValueError: If quantity is not an integer
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValueError(ERROR_INVALID_QUANTITY)

        if quantity <= 0:
            self.remove_item(product_id)
            return

        item = self._find(product_id)
        if item is not None:
            item.quantity = min(quantity, item.stock)
        self._commit()

    def clear_cart(self) -> None:
        self._items = []
        self._commit()

    # ==================== LIFECYCLE ====================

    def subscribe(self, listener: Callable[["CartStore"], None]) -> Callable[[], None]:
        """Call listener(store) after every change; returns an unsubscribe function."""
        return self._listeners.subscribe(listener)

    def close(self) -> None:
        """Flush the current snapshot to storage."""
        self._storage.save(self._items)

    # ==================== INTERNAL ====================

    def _find(self, product_id: str) -> Optional[CartItem]:
        return next((item for item in self._items if item.product_id == product_id), None)

    def _commit(self) -> None:
        self._storage.save(self._items)
        self._listeners.emit(self)
