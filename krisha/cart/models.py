"""Cart line model with Decimal-based pricing."""
import json
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import List

from krisha.money import parse_money


@dataclass
class CartItem:
    """Single product line in the cart."""
    product_id: str
    name: str
    price: Decimal
    image: str
    stock: int
    quantity: int

    def __post_init__(self):
        self.price = parse_money(self.price)

    @property
    def total_price(self) -> Decimal:
        """Price for all units of the line."""
        return self.price * self.quantity

    def copy(self) -> "CartItem":
        return replace(self)

    def to_dict(self) -> dict:
        """Convert to the persisted record (camelCase keys)."""
        return {
            "productId": self.product_id,
            "name": self.name,
            "price": str(self.price),
            "image": self.image,
            "stock": self.stock,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartItem":
        """
        Create from a persisted record.

        Raises:
            KeyError, TypeError, ValueError: If the record is malformed
        """
        product_id = data["productId"]
        if not isinstance(product_id, str) or not product_id:
            raise ValueError("productId must be a non-empty string")
        return cls(
            product_id=product_id,
            name=str(data["name"]),
            price=parse_money(data["price"]),
            image=str(data.get("image") or ""),
            stock=_strict_int(data["stock"]),
            quantity=_strict_int(data["quantity"]),
        )


def _strict_int(value) -> int:
    # bool is an int subclass; 2.0 from a JSON writer is accepted, 2.5 is not
    if isinstance(value, bool):
        raise TypeError(f"Expected integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"Expected integer, got {value!r}")
        return int(value)
    if not isinstance(value, int):
        raise TypeError(f"Expected integer, got {value!r}")
    return value


def serialize_items(items: List[CartItem]) -> str:
    """Serialize lines to the JSON array stored under the cart key."""
    return json.dumps([item.to_dict() for item in items])


def deserialize_items(raw: str) -> List[CartItem]:
    """
    Parse a stored JSON array back into lines.

    Raises:
        ValueError: If the payload is not a JSON array of valid records
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        raise ValueError(f"Cart payload is not JSON: {e}") from e
    if not isinstance(data, list):
        raise ValueError("Cart payload must be a JSON array")
    try:
        return [CartItem.from_dict(record) for record in data]
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid cart record: {e!r}") from e
