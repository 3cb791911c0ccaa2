"""HTTP handlers proxying the TwelveLabs API (Lambda / API Gateway event format)."""

import json

from .. import config
from ..clients.twelvelabs import TwelveLabsClient
from ..errors import ConfigError, NetworkError, ShoppableError
from ..services.analysis import ANALYZE_PROMPT
from ..services.detection import ProductDetectionService
from ..services.related import RelatedProductService


def _response(status_code: int, payload: dict) -> dict:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(payload),
    }


def _error(e: Exception) -> dict:
    """Map an error to a status code and message."""
    if isinstance(e, ConfigError):
        return _response(500, {"error": str(e)})
    if isinstance(e, NetworkError):
        return _response(e.status_code or 502, {"error": str(e)})
    return _response(500, {"error": str(e) or "Internal Server Error"})


def _body(event: dict) -> dict:
    """Request payload from an HTTP or SQS event. Raises ValueError if it is not a JSON object."""
    # Handle SQS event format
    if "Records" in event:
        try:
            raw = event["Records"][0]["body"]
        except (KeyError, IndexError, TypeError):
            raise ValueError("Malformed SQS event")
    else:
        raw = event.get("body") or "{}"

    body = json.loads(raw)
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    return body


def _client() -> TwelveLabsClient:
    settings = config.require_settings("TWELVELABS_API_KEY", "TWELVELABS_API_BASE_URL")
    return TwelveLabsClient(settings["TWELVELABS_API_KEY"], settings["TWELVELABS_API_BASE_URL"])


def analyze_handler(event, context):
    """
    Run product analysis on a video.

    Input: ?videoId=<id>
    Output: {"data": "<raw analysis text>"} - the caller normalizes it.
    """
    params = event.get("queryStringParameters") or {}
    video_id = params.get("videoId")
    if not video_id:
        return _response(400, {"error": "videoId is required"})

    print(f"Analyzing video: {video_id}", flush=True)
    try:
        raw = _client().generate(video_id, ANALYZE_PROMPT)
    except ShoppableError as e:
        print(f"ERROR: {e}", flush=True)
        return _error(e)

    print(f"Analysis response length: {len(raw)}", flush=True)
    return _response(200, {"data": raw})


def save_metadata_handler(event, context):
    """
    Store analysis results on a video.

    Input payload:
    {
        "videoId": "...",
        "indexId": "...",
        "metadata": {"products": [...], "analyzed_at": "2025-01-01T00:00:00Z", "reanalyzed": false}
    }
    """
    try:
        body = _body(event)
    except (ValueError, TypeError) as e:
        return _response(400, {"error": f"Invalid request body: {e}"})

    video_id = body.get("videoId")
    index_id = body.get("indexId")
    if not video_id or not index_id:
        return _response(400, {"error": "Video ID and Index ID are required"})

    metadata = body.get("metadata") or {}
    user_metadata = {}
    if "products" in metadata:
        # Stored as a JSON string: user metadata values must be scalars
        products = metadata["products"]
        user_metadata["products"] = products if isinstance(products, str) else json.dumps(products)
    if metadata.get("analyzed_at"):
        user_metadata["analyzed_at"] = metadata["analyzed_at"]
    if "reanalyzed" in metadata:
        user_metadata["reanalyzed"] = bool(metadata["reanalyzed"])

    try:
        data = _client().update_user_metadata(index_id, video_id, user_metadata)
    except ShoppableError as e:
        print(f"ERROR updating video metadata: {e}", flush=True)
        return _error(e)

    payload = {"success": True, "message": "Video metadata updated successfully"}
    if data:
        payload["data"] = data
    return _response(200, payload)


def related_products_handler(event, context):
    """
    Find products related to one in the video.

    Input payload:
    {
        "indexId": "...",           # required
        "productName": "...",       # at least one of productName / category / productId
        "category": "...",
        "productId": "...",
        "videoId": "...",
        "limit": 4,
        "enrich": true              # optional, add a generated why-recommended blurb
    }
    """
    try:
        body = _body(event)
    except (ValueError, TypeError) as e:
        return _response(400, {"error": f"Invalid request body: {e}"})

    index_id = body.get("indexId")
    if not index_id:
        return _response(400, {"error": "indexId is required"})
    if not (body.get("productId") or body.get("category") or body.get("productName")):
        return _response(400, {"error": "At least one of productId, category, or productName is required"})

    try:
        limit = int(body.get("limit", config.RELATED_PRODUCTS_LIMIT))
    except (TypeError, ValueError):
        return _response(400, {"error": "limit must be an integer"})

    try:
        related = RelatedProductService(_client()).find_related(
            index_id,
            product_name=body.get("productName"),
            category=body.get("category"),
            product_id=body.get("productId"),
            video_id=body.get("videoId"),
            limit=limit,
            enrich=bool(body.get("enrich", True)),
        )
    except ShoppableError as e:
        print(f"ERROR finding related products: {e}", flush=True)
        return _error(e)

    return _response(200, {
        "success": True,
        "relatedProducts": [
            {
                "id": p.id,
                "name": p.name,
                "description": p.description,
                "price": p.price,
                "category": p.category,
                "timeAppearance": list(p.time_appearance),
                "confidence": p.confidence,
                "whyRecommended": p.why_recommended,
            }
            for p in related
        ],
    })


def detect_products_handler(event, context):
    """
    Detect products in a video by searching the index per category.

    Input payload:
    {
        "videoId": "...",
        "indexId": "...",
        "enrich": true              # optional, add a generated description per product
    }
    """
    try:
        body = _body(event)
    except (ValueError, TypeError) as e:
        return _response(400, {"error": f"Invalid request body: {e}"})

    video_id = body.get("videoId")
    index_id = body.get("indexId")
    if not video_id or not index_id:
        return _response(400, {"error": "videoId and indexId are required"})

    print(f"Detecting products in video: {video_id}", flush=True)
    try:
        products = ProductDetectionService(_client()).detect(
            index_id, video_id, enrich=bool(body.get("enrich", True))
        )
    except ShoppableError as e:
        print(f"ERROR detecting products: {e}", flush=True)
        return _error(e)

    print(f"Detected {len(products)} products", flush=True)
    return _response(200, {"success": True, "products": [p.to_dict() for p in products]})
