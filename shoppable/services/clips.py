"""Helpers for reading clip-grouped search results.

Search results come back as
[{"confidence": 0.8, "clips": [{"video_id", "start", "end", "metadata": {...}}]}]
and any level of that may be missing or malformed.
"""

import logging
from typing import Any, Iterator

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def confident_clips(results: list[Any], min_confidence: float) -> Iterator[tuple[float, dict[str, Any]]]:
    """Yield (confidence, clip) for well-formed clips of results at or above min_confidence."""
    skipped = 0
    for result in results:
        if not isinstance(result, dict):
            skipped += 1
            continue
        confidence = result.get("confidence")
        if not _is_number(confidence) or confidence < min_confidence:
            continue

        clips = result.get("clips")
        for clip in clips if isinstance(clips, list) else []:
            if clip_range(clip) is None:
                skipped += 1
                continue
            yield float(confidence), clip

    if skipped:
        logger.warning(f"Skipped {skipped} malformed search results/clips")


def clip_range(clip: Any) -> tuple[float, float] | None:
    """(start, end) of a clip, or None if the clip has no numeric bounds."""
    if not isinstance(clip, dict):
        return None
    start, end = clip.get("start"), clip.get("end")
    if not (_is_number(start) and _is_number(end)):
        return None
    return float(start), float(end)


def clip_metadata(clip: dict[str, Any]) -> dict[str, Any]:
    metadata = clip.get("metadata")
    return metadata if isinstance(metadata, dict) else {}


def clip_text(clip: dict[str, Any]) -> str:
    """Transcript / on-screen text attached to a clip, or ""."""
    text = clip_metadata(clip).get("text")
    return text if isinstance(text, str) else ""
