"""Related product model - found by searching the video index."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RelatedProduct:
    """A product recommendation derived from a search clip."""

    id: str
    name: str
    description: str
    category: str
    time_appearance: tuple[float, float]
    confidence: float
    price: float | None = None  # search results carry no price
    video_id: str | None = None
    why_recommended: str | None = None
