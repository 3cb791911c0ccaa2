"""Detected product model - found by category searches over the index."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DetectedProduct:
    """A product spotted in a search clip for one of the detection categories."""

    id: str
    name: str
    description: str
    category: str
    time_appearance: tuple[float, float]
    confidence: float
    position: tuple[float, float] = (50.0, 50.0)  # center, % of frame
    context: str | None = None                    # generated shopper-facing blurb

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "timeAppearance": list(self.time_appearance),
            "confidence": self.confidence,
            "position": {"x": self.position[0], "y": self.position[1]},
            "aiGeneratedContext": self.context,
        }
