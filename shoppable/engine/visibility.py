"""Which products are on screen at a playback time."""

from ..models.product import Product


def compute_active(products: list[Product], t: float) -> list[Product]:
    """Return products whose timeline contains t (both ends inclusive), in input order."""
    return [p for p in products if p.start <= t <= p.end]
