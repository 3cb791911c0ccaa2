"""Product model - a product detected in a video by the analysis backend."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ProductKey:
    """Identity of a product inside one video's product list.

    Products carry no upstream ID, so brand, name and timeline bounds
    together identify them.
    """

    brand: str
    product_name: str
    start: float
    end: float


@dataclass(frozen=True)
class Product:
    """A product shown in a video."""

    brand: str
    product_name: str
    timeline: tuple[float, float]             # (start, end) in seconds
    location: tuple[float, float, float, float]  # [x%, y%, w%, h%]
    price: str                                # free text, may be a sentinel like "Not specified"
    description: str

    @property
    def start(self) -> float:
        return self.timeline[0]

    @property
    def end(self) -> float:
        return self.timeline[1]

    @property
    def key(self) -> ProductKey:
        return ProductKey(self.brand, self.product_name, self.start, self.end)

    def is_active_at(self, t: float) -> bool:
        """Closed interval: both ends count as active."""
        return self.start <= t <= self.end

    def to_dict(self) -> dict[str, Any]:
        """Wire format used by the analysis backend and stored metadata."""
        return {
            "timeline": [self.start, self.end],
            "brand": self.brand,
            "product_name": self.product_name,
            "location": list(self.location),
            "price": self.price,
            "description": self.description,
        }
