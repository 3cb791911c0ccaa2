"""Business logic services."""

from .analysis import AnalysisService
from .detection import ProductDetectionService
from .related import RelatedProductService

__all__ = ["AnalysisService", "ProductDetectionService", "RelatedProductService"]
