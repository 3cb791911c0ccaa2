"""Entry points: HTTP handlers and the command-line demo."""

from .api import analyze_handler, detect_products_handler, related_products_handler, save_metadata_handler

__all__ = ["analyze_handler", "detect_products_handler", "related_products_handler", "save_metadata_handler"]
