"""API clients for external services."""

from .twelvelabs import TwelveLabsClient

__all__ = ["TwelveLabsClient"]
