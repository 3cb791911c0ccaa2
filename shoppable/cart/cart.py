"""Cart aggregator with write-through persistence."""

import json
import logging
from typing import Callable

from ..config import CART_STORAGE_KEY
from ..errors import PersistenceError
from ..models.cart import CartItem
from ..models.product import Product
from ..models.related import RelatedProduct
from .store import KeyValueStore

logger = logging.getLogger(__name__)


class Cart:
    """Quantity-keyed cart. Every mutation saves a full snapshot to the store."""

    def __init__(
        self,
        store: KeyValueStore,
        storage_key: str = CART_STORAGE_KEY,
        on_open: Callable[[], None] | None = None,
    ):
        self.store = store
        self.storage_key = storage_key
        self.on_open = on_open
        self.items: list[CartItem] = []
        self.is_open = False
        self._loaded = False

    def load(self) -> list[CartItem]:
        """Load the saved cart once. Unreadable data means an empty cart."""
        if self._loaded:
            return self.items
        self._loaded = True

        try:
            raw = self.store.get(self.storage_key)
            items = [CartItem.from_dict(d) for d in json.loads(raw)] if raw else []
        except (PersistenceError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Failed to load cart, starting empty: {e}")
            items = []

        self.items = [item for item in items if item.quantity >= 1]
        if len(self.items) < len(items):
            logger.warning(f"Dropped {len(items) - len(self.items)} saved cart items with no quantity")
        return self.items

    def save(self):
        try:
            self.store.set(self.storage_key, json.dumps([item.to_dict() for item in self.items]))
        except PersistenceError as e:
            logger.error(f"Failed to save cart: {e}")

    def flush(self):
        """Write the current snapshot, e.g. on shutdown."""
        if self._loaded:
            self.save()

    def add_item(self, item: CartItem | Product | RelatedProduct):
        """Add one of an item; bumps the quantity if it's already in the cart. Opens the cart."""
        self.load()
        item = _to_cart_item(item)
        existing = self.get(item.id)
        if existing:
            existing.quantity += 1
        else:
            item.quantity = 1
            self.items.append(item)
        self.save()
        self._open()

    def update_quantity(self, item_id: str, delta: int):
        """Change quantity by delta. Items that drop to zero or below are removed."""
        self.load()
        updated = []
        for item in self.items:
            if item.id == item_id:
                quantity = item.quantity + delta
                if quantity <= 0:
                    continue
                item.quantity = quantity
            updated.append(item)
        self.items = updated
        self.save()

    def remove_item(self, item_id: str):
        self.load()
        self.items = [item for item in self.items if item.id != item_id]
        self.save()

    def clear_cart(self):
        self.load()
        self.items = []
        self.save()

    def toggle_cart(self):
        self.is_open = not self.is_open

    def get(self, item_id: str) -> CartItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def __contains__(self, item_id: str) -> bool:
        return self.get(item_id) is not None

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def total_price(self) -> float:
        return round(sum(item.unit_price * item.quantity for item in self.items), 2)

    def _open(self):
        self.is_open = True
        if self.on_open:
            self.on_open()


def _to_cart_item(item: CartItem | Product | RelatedProduct) -> CartItem:
    if isinstance(item, Product):
        return CartItem.from_product(item)
    if isinstance(item, RelatedProduct):
        return CartItem.from_related(item)
    return CartItem(**item.to_dict())
