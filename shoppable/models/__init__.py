"""Data models."""

from .cart import CartItem
from .detected import DetectedProduct
from .product import Product, ProductKey
from .related import RelatedProduct
from .video import VideoItem

__all__ = ["CartItem", "DetectedProduct", "Product", "ProductKey", "RelatedProduct", "VideoItem"]
