"""Parse analysis responses into validated Product records."""

import json
import re
from typing import Any

from .errors import ParseError, ParseErrorKind
from .models.product import Product

_FENCE = re.compile(r"^\s*```[\w-]*[ \t]*\n?(.*?)\n?\s*```\s*$", re.DOTALL)

_TEXT_FIELDS = ("brand", "product_name", "description")


class ResponseNormalizer:
    """Turn the analysis backend's free-text JSON into products."""

    @staticmethod
    def strip_fence(raw: str) -> str:
        """Remove a markdown code fence around the JSON body, if present.

        "```json\\n[...]\\n```" -> "[...]"
        """
        match = _FENCE.match(raw)
        if match:
            return match.group(1).strip()

        # Unbalanced fences: drop whichever side is there
        text = raw.strip()
        if text.startswith("```"):
            text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.endswith("```"):
            text = text[:-3]
        return text.strip()

    @staticmethod
    def normalize(raw: str) -> list[Product]:
        """
        Parse raw analysis output into products, preserving order.

        Expected format (optionally fenced):
        [
          {"timeline": [start, end], "brand": "...", "product_name": "...",
           "location": [x, y, w, h], "price": "...", "description": "..."}
        ]

        Raises ParseError if the text is not JSON, not an array, or any
        element is malformed. No partial results.
        """
        if not isinstance(raw, str):
            raise ParseError(
                ParseErrorKind.NOT_JSON,
                f"Expected response text, got {type(raw).__name__}",
                raw_output=repr(raw),
            )

        body = ResponseNormalizer.strip_fence(raw)

        try:
            data = json.loads(body)
        except (json.JSONDecodeError, TypeError) as e:
            raise ParseError(ParseErrorKind.NOT_JSON, f"Response is not valid JSON: {e}", raw_output=raw)

        if not isinstance(data, list):
            raise ParseError(
                ParseErrorKind.NOT_ARRAY,
                f"Expected a JSON array, got {type(data).__name__}",
                raw_output=raw,
            )

        return [ResponseNormalizer.parse_product(item, i, raw) for i, item in enumerate(data)]

    @staticmethod
    def parse_product(item: Any, index: int = 0, raw: str = "") -> Product:
        """Validate one decoded element and build a Product."""

        def fail(reason: str) -> ParseError:
            return ParseError(ParseErrorKind.INVALID_PRODUCT, f"Product {index}: {reason}", raw_output=raw)

        if not isinstance(item, dict):
            raise fail(f"expected an object, got {type(item).__name__}")

        for name in _TEXT_FIELDS:
            if not isinstance(item.get(name), str):
                raise fail(f"'{name}' must be a string")

        price = item.get("price")
        if _is_number(price):
            price = str(price)
        if not isinstance(price, str):
            raise fail("'price' must be a string")

        timeline = item.get("timeline")
        if not _is_number_list(timeline, 2):
            raise fail("'timeline' must be [start, end]")
        start, end = float(timeline[0]), float(timeline[1])
        if start > end:
            raise fail(f"timeline start {start} is after end {end}")

        location = item.get("location")
        if not _is_number_list(location, 4):
            raise fail("'location' must be [x, y, width, height]")
        if any(not 0 <= v <= 100 for v in location):
            raise fail(f"'location' values must be percentages in [0, 100], got {location}")

        return Product(
            brand=item["brand"],
            product_name=item["product_name"],
            timeline=(start, end),
            location=tuple(float(v) for v in location),
            price=price,
            description=item["description"],
        )

    @staticmethod
    def serialize(products: list[Product]) -> str:
        """Format products as the JSON array that normalize() accepts."""
        return json.dumps([p.to_dict() for p in products])


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_number_list(value: Any, length: int) -> bool:
    return isinstance(value, list) and len(value) == length and all(_is_number(v) for v in value)


def normalize(raw: str) -> list[Product]:
    return ResponseNormalizer.normalize(raw)


def serialize(products: list[Product]) -> str:
    return ResponseNormalizer.serialize(products)


def load_products(value: Any) -> list[Product]:
    """Load products stored in video user metadata.

    Stored as a JSON string by save_metadata(), but older records may
    hold an already-decoded list.
    """
    if isinstance(value, str):
        return normalize(value)
    if isinstance(value, list):
        return [ResponseNormalizer.parse_product(item, i) for i, item in enumerate(value)]
    raise ParseError(
        ParseErrorKind.NOT_ARRAY,
        f"Stored products must be a JSON string or list, got {type(value).__name__}",
    )
