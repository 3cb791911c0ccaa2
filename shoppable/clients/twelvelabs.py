"""TwelveLabs video understanding API client."""

import logging
from typing import Any

import requests

from ..config import ANALYZE_TIMEOUT, REQUEST_TIMEOUT
from ..errors import NetworkError
from ..models.video import VideoItem

logger = logging.getLogger(__name__)


class TwelveLabsClient:
    """Low-level TwelveLabs API client. No retries: failures surface to the caller."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float = REQUEST_TIMEOUT,
        analyze_timeout: float = ANALYZE_TIMEOUT,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.analyze_timeout = analyze_timeout

    def _get_headers(self) -> dict:
        return {
            "x-api-key": self.api_key,
            "Content-Type": "application/json",
        }

    def _request(
        self,
        method: str,
        path: str,
        json_body: dict | None = None,
        params: dict | None = None,
        timeout: float | None = None,
    ) -> requests.Response:
        """Send a request and convert failures to NetworkError."""
        url = f"{self.base_url}{path}"
        timeout = timeout or self.timeout
        try:
            response = requests.request(
                method,
                url,
                json=json_body,
                params=params,
                headers=self._get_headers(),
                timeout=timeout,
            )
        except requests.Timeout:
            raise NetworkError(f"TwelveLabs API timed out after {timeout:.0f}s ({method} {path})")
        except requests.RequestException as e:
            raise NetworkError(f"TwelveLabs API request failed ({method} {path}): {e}")

        if not response.ok:
            body = response.text
            logger.error(f"TwelveLabs API error ({response.status_code}): {body}")
            raise NetworkError(
                f"TwelveLabs API error ({response.status_code}): {body}",
                status_code=response.status_code,
                body=body,
            )
        return response

    def _json(self, response: requests.Response) -> dict[str, Any]:
        if not response.text:
            raise NetworkError("Empty response from TwelveLabs API", status_code=response.status_code)
        try:
            data = response.json()
        except ValueError:
            raise NetworkError(
                "TwelveLabs API returned a non-JSON body",
                status_code=response.status_code,
                body=response.text,
            )
        if not isinstance(data, dict):
            raise NetworkError(
                f"Expected a JSON object from TwelveLabs API, got {type(data).__name__}",
                status_code=response.status_code,
                body=response.text,
            )
        return data

    def generate(self, video_id: str, prompt: str) -> str:
        """Run an open-ended prompt against a video. Returns the raw `data` text."""
        response = self._request(
            "POST",
            "/generate",
            json_body={"prompt": prompt, "video_id": video_id, "stream": False},
            timeout=self.analyze_timeout,
        )
        data = self._json(response)
        if "data" not in data:
            raise NetworkError("No data field received from analysis", status_code=response.status_code)
        if not isinstance(data["data"], str):
            raise NetworkError(
                f"Analysis data must be text, got {type(data['data']).__name__}",
                status_code=response.status_code,
                body=response.text,
            )
        return data["data"]

    def search(
        self,
        index_id: str,
        query_text: str,
        search_options: list[str],
        page_limit: int = 10,
        threshold: str = "medium",
        adjust_confidence_level: float = 0.6,
        video_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """Search an index for clips. Returns the raw result list."""
        body: dict[str, Any] = {
            "query_text": query_text,
            "index_id": index_id,
            "search_options": search_options,
            "group_by": "clip",
            "page_limit": page_limit,
            "threshold": threshold,
            "adjust_confidence_level": adjust_confidence_level,
        }
        if video_id:
            body["video_id"] = video_id

        data = self._json(self._request("POST", "/search", json_body=body))
        results = data.get("data")
        return results if isinstance(results, list) else []

    def list_videos(self, index_id: str, limit: int = 50) -> list[VideoItem]:
        """List videos in an index, newest first."""
        response = self._request("GET", f"/indexes/{index_id}/videos", params={"page_limit": limit})
        items = self._json(response).get("data")
        if not isinstance(items, list):
            return []
        return [VideoItem.from_api(v) for v in items if isinstance(v, dict)]

    def get_video(self, index_id: str, video_id: str) -> VideoItem:
        """Retrieve a video with its HLS URL and user metadata."""
        response = self._request("GET", f"/indexes/{index_id}/videos/{video_id}")
        video = VideoItem.from_api(self._json(response))
        if video.index_id is None:
            video.index_id = index_id
        return video

    def update_user_metadata(self, index_id: str, video_id: str, user_metadata: dict[str, Any]) -> dict:
        """Replace a video's user metadata. Values must be strings, numbers or booleans."""
        response = self._request(
            "PUT",
            f"/indexes/{index_id}/videos/{video_id}",
            json_body={"user_metadata": user_metadata},
        )
        # 204 No Content is the normal success response
        if response.status_code == 204 or not response.text:
            return {}
        try:
            return response.json()
        except ValueError:
            return {}
