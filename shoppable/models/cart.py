"""Cart item model."""

import re
from dataclasses import asdict, dataclass
from typing import Any

from .product import Product
from .related import RelatedProduct

_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")


@dataclass
class CartItem:
    """A product in the cart with its quantity."""

    id: str
    name: str
    price: str | float | None = None
    brand: str = ""
    description: str = ""
    quantity: int = 1

    @classmethod
    def from_product(cls, product: Product, item_id: str | None = None) -> "CartItem":
        """Build from a detected product. The id defaults to the product key."""
        if item_id is None:
            key = product.key
            item_id = f"{key.brand}|{key.product_name}|{key.start}|{key.end}"
        return cls(
            id=item_id,
            name=product.product_name,
            price=product.price,
            brand=product.brand,
            description=product.description,
        )

    @classmethod
    def from_related(cls, related: RelatedProduct) -> "CartItem":
        return cls(
            id=related.id,
            name=related.name,
            price=related.price,
            description=related.description,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CartItem":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            price=data.get("price"),
            brand=data.get("brand", ""),
            description=data.get("description", ""),
            quantity=int(data.get("quantity", 1)),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @property
    def unit_price(self) -> float:
        """Numeric price. Missing or non-numeric prices count as 0."""
        if self.price is None or isinstance(self.price, bool):
            return 0.0
        if isinstance(self.price, (int, float)):
            return float(self.price)
        match = _NUMBER.search(self.price.replace(",", ""))
        return float(match.group()) if match else 0.0
