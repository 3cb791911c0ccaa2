"""Turn a media player's progress into a bounded-rate stream of time ticks."""

import logging
import time
from typing import Callable

from ..config import TICK_INTERVAL
from ..engine.visibility import compute_active
from ..models.product import Product, ProductKey
from .base import MediaPlayer

logger = logging.getLogger(__name__)


class PlayerHandle:
    """What the host gets on player ready: a way to jump to a product."""

    def __init__(self, source: "PlaybackTimeSource"):
        self._source = source

    def seek_to(self, t: float):
        self._source.seek_to(t)


class PlaybackTimeSource:
    """
    Deliver time ticks from a MediaPlayer.

    Ticks arrive at most once per `interval` while playing and not at all
    while paused. seek_to() delivers a tick right away, backward jumps
    included. Each tick fires on_time_update, and on_visible_products_change
    when the set of on-screen products differs from the last tick.
    """

    def __init__(
        self,
        player: MediaPlayer,
        products: list[Product] | None = None,
        interval: float = TICK_INTERVAL,
        on_time_update: Callable[[float], None] | None = None,
        on_visible_products_change: Callable[[list[Product]], None] | None = None,
        on_player_ready: Callable[[PlayerHandle], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.player = player
        self.products: list[Product] = list(products or [])
        self.interval = interval
        self.on_time_update = on_time_update
        self.on_visible_products_change = on_visible_products_change
        self.on_player_ready = on_player_ready
        self._clock = clock
        self._last_tick_at: float | None = None
        self._visible_keys: list[ProductKey] | None = None
        self.current_time = 0.0

    def set_products(self, products: list[Product]):
        """Swap the product list; the next tick re-announces visibility."""
        self.products = list(products)
        self._visible_keys = None

    def ready(self) -> PlayerHandle:
        """Call once the player has loaded its media."""
        handle = PlayerHandle(self)
        if self.on_player_ready:
            self.on_player_ready(handle)
        return handle

    def handle_progress(self, played_seconds: float) -> bool:
        """Progress event from the player. Returns True if a tick was delivered."""
        if not self.player.playing:
            return False
        now = self._clock()
        if self._last_tick_at is not None and now - self._last_tick_at < self.interval:
            return False
        self._last_tick_at = now
        self._deliver(played_seconds)
        return True

    def poll(self) -> bool:
        """Pull the player's current time (for players that don't push progress)."""
        return self.handle_progress(self.player.current_time())

    def seek_to(self, t: float):
        self.player.seek(t)
        self._last_tick_at = self._clock()
        self._deliver(self.player.current_time())

    def play(self):
        self.player.play()

    def pause(self):
        self.player.pause()

    def toggle_play_pause(self):
        if self.player.playing:
            self.pause()
        else:
            self.play()

    def set_muted(self, muted: bool):
        self.player.set_muted(muted)

    def run(self, until: float | None = None, sleep: Callable[[float], None] = time.sleep):
        """Poll until the player stops, ends, or reaches `until` seconds."""
        self.play()
        while self.player.playing:
            self.poll()
            if until is not None and self.current_time >= until:
                break
            sleep(self.interval)
        # Final position (end of media or pause) still gets a tick
        self._deliver(self.player.current_time())

    def _deliver(self, t: float):
        self.current_time = t
        if self.on_time_update:
            self.on_time_update(t)

        visible = compute_active(self.products, t)
        keys = [p.key for p in visible]
        if keys != self._visible_keys:
            self._visible_keys = keys
            logger.debug(f"Visible products at {t:.1f}s: {len(visible)}")
            if self.on_visible_products_change:
                self.on_visible_products_change(visible)
