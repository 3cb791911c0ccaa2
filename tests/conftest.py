"""Pytest fixtures for the shoppable video tests."""

import json
from unittest.mock import MagicMock

import pytest

from shoppable.cart import Cart, MemoryStore
from shoppable.models import Product


def make_product(
    name: str = "Trail Runner",
    brand: str = "Acme",
    start: float = 10.0,
    end: float = 20.0,
    price: str = "$49.99",
) -> Product:
    return Product(
        brand=brand,
        product_name=name,
        timeline=(start, end),
        location=(10.0, 20.0, 5.0, 5.0),
        price=price,
        description=f"{name} shown in the video.",
    )


def mock_response(status_code: int = 200, payload=None, text: str | None = None) -> MagicMock:
    """Build a stand-in for requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    if text is None:
        text = json.dumps(payload) if payload is not None else ""
    response.text = text
    if payload is not None:
        response.json.return_value = payload
    else:
        response.json.side_effect = ValueError("No JSON")
    return response


@pytest.fixture
def product():
    return make_product()


@pytest.fixture
def products():
    return [
        make_product("Trail Runner", start=10.0, end=20.0),
        make_product("Water Bottle", brand="Hydra", start=15.0, end=30.0, price="Not specified"),
        make_product("Sunglasses", brand="Shade", start=40.0, end=45.0, price="12.50"),
    ]


@pytest.fixture
def raw_products_json():
    """Analysis output as the backend returns it."""
    return json.dumps([
        {
            "timeline": [13.0, 16.0],
            "brand": "Jennie-O",
            "product_name": "Ground turkey",
            "location": [5.2, 18.5, 7.8, 9.3],
            "price": "Not specified",
            "description": "Displayed on a countertop.",
        },
        {
            "timeline": [216, 224],
            "brand": "Unknown",
            "product_name": "Flat piece of dough",
            "location": [15.6, 25.9, 5.2, 4.6],
            "price": "$3.99",
            "description": "Resting on parchment paper.",
        },
    ])


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def cart(store):
    cart = Cart(store)
    cart.load()
    return cart
