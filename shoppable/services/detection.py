"""Product detection service - find products by searching the index per category."""

import logging
from dataclasses import replace
from typing import Any

from ..clients.twelvelabs import TwelveLabsClient
from ..config import DETECT_ADJUST_CONFIDENCE, DETECT_MIN_CONFIDENCE
from ..errors import NetworkError
from ..models.detected import DetectedProduct
from .clips import clip_metadata, clip_range, clip_text, confident_clips

logger = logging.getLogger(__name__)

PRODUCT_CATEGORIES = [
    "clothing", "apparel", "fashion", "accessories",
    "electronics", "gadgets", "devices",
    "furniture", "home decor", "kitchenware",
    "beauty products", "cosmetics", "skincare",
    "sports equipment", "fitness gear",
    "jewelry", "watches",
]

SEARCH_OPTIONS = ["visual", "conversation", "text_in_video", "logo"]

CONTEXT_PROMPT = """Generate a brief product description for the following item seen in the video between {start:.1f}s and {end:.1f}s:
- Product: {name}
- Category: {category}
- Context from video: {text}

Focus on how the product is being used in the scene, its appearance, and potential benefits.
Keep it concise (2-3 sentences) and make it appealing for shoppers."""


class ProductDetectionService:
    """Detect products by running one search per product category."""

    def __init__(self, client: TwelveLabsClient):
        self.client = client

    def detect(self, index_id: str, video_id: str, enrich: bool = True) -> list[DetectedProduct]:
        """
        Detect products in a video.

        1. Search the index once per category
        2. Keep confident clips, one product per (start, end)
        3. Optionally add a generated description to each product

        A failed category search is logged and skipped. If every search
        fails, the last NetworkError is raised.
        """
        searches = []
        last_error = None
        for category in PRODUCT_CATEGORIES:
            try:
                results = self.client.search(
                    index_id,
                    f"Show me all {category} items visible in this scene",
                    SEARCH_OPTIONS,
                    page_limit=10,
                    adjust_confidence_level=DETECT_ADJUST_CONFIDENCE,
                    video_id=video_id,
                )
            except NetworkError as e:
                logger.warning(f"Search for {category} failed: {e}")
                last_error = e
                continue
            searches.append((category, results))

        if not searches and last_error is not None:
            raise last_error

        products = self._parse_searches(searches, video_id)
        logger.info(f"Detected {len(products)} products in video {video_id}")

        if enrich:
            products = [self._with_context(p, video_id) for p in products]
        return products

    def _parse_searches(self, searches: list[tuple[str, list[Any]]], video_id: str) -> list[DetectedProduct]:
        products = []
        seen_clips = set()

        for category, results in searches:
            for confidence, clip in confident_clips(results, DETECT_MIN_CONFIDENCE):
                clip_id = f"{clip['start']}-{clip['end']}"
                if clip_id in seen_clips:
                    continue
                seen_clips.add(clip_id)

                text = clip_text(clip)
                products.append(DetectedProduct(
                    id=f"{video_id}-{clip_id}",
                    name=product_name(text, category),
                    description=product_description(text, category),
                    category=category,
                    time_appearance=clip_range(clip),
                    confidence=confidence,
                    position=estimate_position(clip_metadata(clip).get("visual_detections")),
                ))

        return products

    def _with_context(self, product: DetectedProduct, video_id: str) -> DetectedProduct:
        start, end = product.time_appearance
        prompt = CONTEXT_PROMPT.format(
            start=start,
            end=end,
            name=product.name,
            category=product.category,
            text=product.description,
        )
        try:
            context = self.client.generate(video_id, prompt)
        except NetworkError as e:
            logger.warning(f"Could not generate context for {product.id}: {e}")
            return product
        return replace(product, context=context.strip() or None)


def product_name(text: str, category: str) -> str:
    """First two words of the clip text, or "<Category> Item".

    "Leather boots on a shelf" -> "Leather boots"
    """
    words = text.split()
    if words:
        return " ".join(words[:2])
    return f"{category[:1].upper()}{category[1:]} Item"


def product_description(text: str, category: str) -> str:
    if not text:
        return f"A {category} item detected in the video."
    return text[:100] + ("..." if len(text) > 100 else "")


def estimate_position(detections: Any) -> tuple[float, float]:
    """Center of the most confident bounding box, as % of the frame. Defaults to the middle."""
    if not isinstance(detections, list):
        return 50.0, 50.0
    boxes = [d for d in detections if isinstance(d, dict) and isinstance(d.get("boundingBox"), dict)]
    if not boxes:
        return 50.0, 50.0

    def confidence(d: dict) -> float:
        value = d.get("confidence")
        return value if isinstance(value, (int, float)) else 0.0

    best = max(boxes, key=confidence)
    box = best["boundingBox"]
    try:
        x = (float(box["x"]) + float(box["width"]) / 2) * 100
        y = (float(box["y"]) + float(box["height"]) / 2) * 100
    except (KeyError, TypeError, ValueError):
        return 50.0, 50.0
    return x, y
