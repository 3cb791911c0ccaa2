"""Tests for the command-line timeline replay."""

from shoppable.cart import Cart, MemoryStore
from shoppable.handlers.demo import TAIL_SECONDS, run_demo
from shoppable.session import ShoppableSession


class TestRunDemo:

    def test_plays_to_end(self, products, capsys):
        session = ShoppableSession(Cart(MemoryStore()))
        session.set_products(products)

        run_demo(session, rate=5000.0)

        out = capsys.readouterr().out
        assert "Playing 0:50 at 5000.0x with 3 products" in out
        assert session.current_time == 45.0 + TAIL_SECONDS
        # Everything is past its window at the end
        assert all(session.is_collapsed(p) for p in products)
