"""Tests for the cart aggregator and its stores."""

import json

import pytest

from conftest import make_product
from shoppable.cart import Cart, JsonFileStore, MemoryStore
from shoppable.config import CART_STORAGE_KEY
from shoppable.errors import PersistenceError
from shoppable.models import CartItem, RelatedProduct


def item(item_id: str, price=10.0) -> CartItem:
    return CartItem(id=item_id, name=f"Item {item_id}", price=price)


class FailingStore(MemoryStore):
    def get(self, key):
        raise PersistenceError("disk on fire")

    def set(self, key, value):
        raise PersistenceError("disk on fire")


class TestMutations:

    def test_add_inserts_with_quantity_one(self, cart):
        cart.add_item(item("a"))
        assert cart.get("a").quantity == 1

    def test_add_existing_increments(self, cart):
        cart.add_item(item("a"))
        cart.add_item(item("a"))
        assert len(cart.items) == 1
        assert cart.get("a").quantity == 2

    def test_add_opens_cart(self, store):
        opened = []
        cart = Cart(store, on_open=lambda: opened.append(True))
        cart.load()
        cart.add_item(item("a"))
        cart.add_item(item("a"))
        assert cart.is_open
        assert opened == [True, True]

    def test_update_quantity_to_zero_removes(self, cart):
        cart.add_item(item("a"))
        cart.update_quantity("a", -1)
        assert "a" not in cart

    def test_update_quantity_below_zero_removes(self, cart):
        cart.add_item(item("a"))
        cart.update_quantity("a", -5)
        assert cart.items == []

    def test_update_quantity_up(self, cart):
        cart.add_item(item("a"))
        cart.update_quantity("a", 3)
        assert cart.get("a").quantity == 4

    def test_update_unknown_id_is_noop(self, cart):
        cart.add_item(item("a"))
        cart.update_quantity("zzz", -1)
        assert cart.total_items == 1

    def test_remove_and_clear(self, cart):
        cart.add_item(item("a"))
        cart.add_item(item("b"))
        cart.remove_item("a")
        assert [i.id for i in cart.items] == ["b"]
        cart.clear_cart()
        assert cart.items == []

    def test_toggle_cart(self, cart):
        cart.toggle_cart()
        assert cart.is_open
        cart.toggle_cart()
        assert not cart.is_open

    def test_add_product_and_related(self, cart):
        product = make_product()
        related = RelatedProduct(
            id="vid-1-2", name="Sock", description="", category="Clothing",
            time_appearance=(1.0, 2.0), confidence=0.9, price=None,
        )
        cart.add_item(product)
        cart.add_item(related)
        cart.add_item(product)
        assert cart.total_items == 3
        assert cart.get("vid-1-2").price is None


class TestTotals:

    def test_total_price_and_items(self, cart):
        cart.add_item(item("a", price=10.00))
        cart.add_item(item("a", price=10.00))
        cart.add_item(item("b", price=5.00))
        cart.update_quantity("b", 2)
        assert cart.total_items == 5
        assert cart.total_price == pytest.approx(35.00)

    @pytest.mark.parametrize("price,expected", [
        ("$12.99", 12.99),
        ("1,299.00 USD", 1299.0),
        ("Not specified", 0.0),
        ("unknown", 0.0),
        (None, 0.0),
        (7, 7.0),
    ])
    def test_unit_price(self, price, expected):
        assert item("a", price=price).unit_price == pytest.approx(expected)

    def test_empty_cart(self, cart):
        assert cart.total_items == 0
        assert cart.total_price == 0


class TestPersistence:

    def test_every_mutation_writes_snapshot(self, cart, store):
        cart.add_item(item("a"))
        saved = json.loads(store.get(CART_STORAGE_KEY))
        assert saved[0]["id"] == "a" and saved[0]["quantity"] == 1

        cart.update_quantity("a", -1)
        assert json.loads(store.get(CART_STORAGE_KEY)) == []

    def test_load_restores_items(self, store):
        first = Cart(store)
        first.load()
        first.add_item(item("a", price="$3.50"))
        first.add_item(item("a", price="$3.50"))

        second = Cart(store)
        second.load()
        assert second.get("a").quantity == 2
        assert second.total_price == pytest.approx(7.0)

    def test_load_only_once(self, store):
        cart = Cart(store)
        cart.load()
        cart.add_item(item("a"))
        store.set(CART_STORAGE_KEY, "[]")
        assert len(cart.load()) == 1

    def test_corrupt_data_loads_empty(self):
        cart = Cart(MemoryStore({CART_STORAGE_KEY: "{not json"}))
        assert cart.load() == []

    def test_store_failures_are_not_raised(self):
        cart = Cart(FailingStore())
        assert cart.load() == []
        cart.add_item(item("a"))
        assert cart.total_items == 1

    def test_json_file_store(self, tmp_path):
        path = tmp_path / "cart.json"
        cart = Cart(JsonFileStore(path))
        cart.load()
        cart.add_item(item("a"))

        reloaded = Cart(JsonFileStore(path))
        assert reloaded.load()[0].id == "a"

    def test_json_file_store_bad_file(self, tmp_path):
        path = tmp_path / "cart.json"
        path.write_text("[1, 2]")
        with pytest.raises(PersistenceError):
            JsonFileStore(path).get(CART_STORAGE_KEY)

    def test_flush_before_load_writes_nothing(self, store):
        Cart(store).flush()
        assert store.get(CART_STORAGE_KEY) is None

    def test_undecodable_file_then_mutation(self, tmp_path):
        path = tmp_path / "cart.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        cart = Cart(JsonFileStore(path))
        assert cart.load() == []

        cart.add_item(item("a"))
        cart.update_quantity("a", 1)
        cart.clear_cart()
        assert cart.items == []

    def test_undecodable_file_raises_persistence_error(self, tmp_path):
        path = tmp_path / "cart.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        with pytest.raises(PersistenceError):
            JsonFileStore(path).get(CART_STORAGE_KEY)

    def test_mutation_before_load_keeps_saved_items(self, store):
        store.set(CART_STORAGE_KEY, json.dumps([item("a").to_dict()]))
        cart = Cart(store)
        cart.add_item(item("b"))

        saved = json.loads(store.get(CART_STORAGE_KEY))
        assert [d["id"] for d in saved] == ["a", "b"]

    def test_load_drops_items_without_quantity(self, store):
        saved = [item("a").to_dict(), {**item("b").to_dict(), "quantity": 0}, {**item("c").to_dict(), "quantity": -2}]
        store.set(CART_STORAGE_KEY, json.dumps(saved))
        cart = Cart(store)
        assert [i.id for i in cart.load()] == ["a"]
        assert cart.total_items == 1
