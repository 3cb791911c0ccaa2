"""Tests for product visibility."""

from conftest import make_product
from shoppable.engine import compute_active


class TestComputeActive:

    def test_closed_interval(self):
        product = make_product(start=10.0, end=20.0)

        assert compute_active([product], 10.0) == [product]
        assert compute_active([product], 20.0) == [product]
        assert compute_active([product], 9.999) == []
        assert compute_active([product], 20.001) == []

    def test_keeps_input_order(self, products):
        active = compute_active(products, 17.0)
        assert [p.product_name for p in active] == ["Trail Runner", "Water Bottle"]

    def test_instant_product(self):
        product = make_product(start=5.0, end=5.0)
        assert compute_active([product], 5.0) == [product]

    def test_empty_list(self):
        assert compute_active([], 12.0) == []
