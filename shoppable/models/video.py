"""Video records returned by the TwelveLabs index API."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class VideoItem:
    """A video in an index, as listed or retrieved."""

    id: str
    created_at: str = ""
    index_id: str | None = None
    system_metadata: dict[str, Any] = field(default_factory=dict)
    hls: dict[str, Any] = field(default_factory=dict)
    user_metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "VideoItem":
        return cls(
            id=data.get("_id") or data.get("id", ""),
            created_at=data.get("created_at", ""),
            index_id=data.get("index_id"),
            system_metadata=_object(data.get("system_metadata")),
            hls=_object(data.get("hls")),
            user_metadata=_object(data.get("user_metadata")),
        )

    @property
    def video_url(self) -> str | None:
        """HLS playback URL, if the video has been processed for streaming."""
        return self.hls.get("video_url")

    @property
    def display_name(self) -> str:
        return (
            self.system_metadata.get("filename")
            or self.system_metadata.get("video_title")
            or f"Video {self.id[-8:]}"
        )

    @property
    def has_user_metadata(self) -> bool:
        return bool(self.user_metadata)


def _object(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}
