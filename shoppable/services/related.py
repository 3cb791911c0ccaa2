"""Related products service - find recommendations by searching the index."""

import logging
from dataclasses import replace
from typing import Any

from ..clients.twelvelabs import TwelveLabsClient
from ..config import RELATED_MIN_CONFIDENCE, RELATED_PRODUCTS_LIMIT
from ..errors import NetworkError
from ..models.related import RelatedProduct
from .clips import clip_range, clip_text, confident_clips

logger = logging.getLogger(__name__)

PRODUCT_INDICATORS = ["wearing", "using", "with", "has", "features", "shows"]

CATEGORIES = [
    "clothing", "apparel", "fashion", "accessories",
    "electronics", "gadgets", "devices",
    "furniture", "home decor", "kitchenware",
    "beauty", "cosmetics", "skincare",
    "sports", "fitness", "jewelry", "watches",
]

RECOMMEND_PROMPT = """Generate a brief product recommendation for the item seen in the video between {start:.1f}s and {end:.1f}s:
- Product: {name}
- Category: {category}

Explain why this product would be a good recommendation based on the context in the video.
Keep it concise (1-2 sentences) and focus on why the viewer might be interested in this product."""


class RelatedProductService:
    """Search the video index for products related to one the viewer picked."""

    def __init__(self, client: TwelveLabsClient):
        self.client = client

    def find_related(
        self,
        index_id: str,
        product_name: str | None = None,
        category: str | None = None,
        product_id: str | None = None,
        video_id: str | None = None,
        limit: int = RELATED_PRODUCTS_LIMIT,
        enrich: bool = True,
    ) -> list[RelatedProduct]:
        """
        Find up to `limit` related products, best match first.

        At least one of product_name, category or product_id is required.
        With enrich, each product gets a generated why_recommended blurb.
        """
        if not (product_name or category or product_id):
            raise ValueError("At least one of product_id, category, or product_name is required")

        search_options = ["visual", "conversation", "text_in_video"]
        if product_id:
            search_options.append("visual_similarity")

        results = self.client.search(
            index_id,
            self.build_query(product_name, category),
            search_options,
            page_limit=limit * 2,  # over-fetch, low-confidence clips are dropped
            adjust_confidence_level=0.6,
            video_id=video_id,
        )
        products = self._parse_results(results)
        logger.info(f"Found {len(products)} related products (limit {limit})")
        products = products[:limit]
        if enrich:
            products = [self._with_recommendation(p) for p in products]
        return products

    @staticmethod
    def build_query(product_name: str | None, category: str | None) -> str:
        if product_name:
            query = f"Products similar to {product_name}"
            if category:
                query += f" in the {category} category"
            return query
        if category:
            return f"Show me {category} products"
        return "Show me related products"

    def _parse_results(self, results: list[Any]) -> list[RelatedProduct]:
        """Turn search clips into products, deduplicated by clip and sorted by confidence."""
        products = []
        seen_clips = set()

        for confidence, clip in confident_clips(results, RELATED_MIN_CONFIDENCE):
            clip_id = f"{clip.get('video_id')}-{clip['start']}-{clip['end']}"
            if clip_id in seen_clips:
                continue
            seen_clips.add(clip_id)

            name, description, category = extract_product_info(clip_text(clip))
            products.append(RelatedProduct(
                id=clip_id,
                name=name,
                description=description or "Related product based on video context",
                category=category or "Unknown",
                time_appearance=clip_range(clip),
                confidence=confidence,
                video_id=clip.get("video_id") if isinstance(clip.get("video_id"), str) else None,
            ))

        return sorted(products, key=lambda p: p.confidence, reverse=True)

    def _with_recommendation(self, product: RelatedProduct) -> RelatedProduct:
        if not product.video_id:
            return product
        start, end = product.time_appearance
        prompt = RECOMMEND_PROMPT.format(start=start, end=end, name=product.name, category=product.category)
        try:
            text = self.client.generate(product.video_id, prompt)
        except NetworkError as e:
            logger.warning(f"Could not generate recommendation for {product.id}: {e}")
            return product
        return replace(product, why_recommended=text.strip() or None)


def extract_product_info(text: str) -> tuple[str, str, str]:
    """Guess (name, description, category) from a clip's transcript text.

    "A woman wearing a red scarf. She..." -> ("A red scarf", "A woman wearing...", "")
    """
    if not text:
        return "Related Item", "", ""

    name = ""
    lower = text.lower()
    for indicator in PRODUCT_INDICATORS:
        index = lower.find(indicator)
        if index >= 0 and index + len(indicator) + 1 < len(text):
            after = text[index + len(indicator) + 1:]
            end = after.find(".")
            name = after[:end] if end > 0 else " ".join(after.split(" ")[:3])
            break

    words = text.split(" ")
    if not name and len(words) >= 2:
        name = " ".join(words[:3])

    category = next((c for c in CATEGORIES if c in lower), "")
    description = text[:100] + ("..." if len(text) > 100 else "")
    return _capitalize(name or "Related Item"), description, _capitalize(category)


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]
