"""Analysis service - detect products in a video and keep them in video metadata."""

import logging
from datetime import datetime, timezone

from ..clients.twelvelabs import TwelveLabsClient
from ..models.product import Product
from ..models.video import VideoItem
from ..normalizer import load_products, normalize, serialize

logger = logging.getLogger(__name__)

ANALYZE_PROMPT = """List all the products shown in the video with the following details:

- **timeline** - Timestamp when the product appears, in the format [start_time, end_time] (in seconds).
- **brand** - Name of the brand.
- **product_name** - Full name of the product.
- **location** - Product location as [x, y, width, height], each a percentage (0-100) of the frame:
    - **x, y**: Top-left corner (0,0 = top-left of video)
    - **width, height**: Bounding box size
- **price** - The price of the product shown or mentioned, if available.
- **description** - Summarize what is said or implied about the product in the video (e.g., via voiceover, subtitles, or customer testimonials).

If multiple products appear in the same scene, list them separately with their own locations.

**Respond with a valid JSON array only, no markdown formatting:**

[
  {
    "timeline": [start, end],
    "brand": "brand_name",
    "product_name": "product_name",
    "location": [x, y, width, height],
    "price": "price_info",
    "description": "product_description"
  }
]
"""


class AnalysisService:
    """Run product analysis and persist results as video user metadata."""

    def __init__(self, client: TwelveLabsClient):
        self.client = client

    def analyze(self, video_id: str) -> list[Product]:
        """
        Ask the backend to list the video's products.

        Raises NetworkError if the call fails and ParseError if the
        response can't be turned into products.
        """
        logger.info(f"Analyzing video {video_id}")
        raw = self.client.generate(video_id, ANALYZE_PROMPT)
        products = normalize(raw)
        logger.info(f"Detected {len(products)} products in video {video_id}")
        return products

    def save_metadata(
        self,
        index_id: str,
        video_id: str,
        products: list[Product],
        reanalyzed: bool = False,
    ) -> dict:
        """Store products (as a JSON string) and the analysis time on the video."""
        user_metadata = {
            "products": serialize(products),
            "analyzed_at": datetime.now(timezone.utc).isoformat(),
            "reanalyzed": reanalyzed,
        }
        return self.client.update_user_metadata(index_id, video_id, user_metadata)

    def existing_products(self, video: VideoItem) -> list[Product] | None:
        """Products saved on the video by an earlier analysis, or None if there are none."""
        stored = video.user_metadata.get("products")
        if stored is None:
            return None
        return load_products(stored)

    def products_for_video(self, video: VideoItem, force_reanalyze: bool = False) -> list[Product]:
        """
        Products for a video, analyzing only when nothing is stored yet.

        1. Use stored products unless force_reanalyze
        2. Otherwise analyze the video
        3. Save the result back before returning it
        """
        if not force_reanalyze:
            existing = self.existing_products(video)
            if existing is not None:
                logger.info(f"Using {len(existing)} stored products for video {video.id}")
                return existing

        products = self.analyze(video.id)
        self.save_metadata(video.index_id or "", video.id, products, reanalyzed=force_reanalyze)
        return products
