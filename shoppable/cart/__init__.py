"""Shopping cart and its local persistence."""

from .cart import Cart
from .store import JsonFileStore, KeyValueStore, MemoryStore

__all__ = ["Cart", "JsonFileStore", "KeyValueStore", "MemoryStore"]
