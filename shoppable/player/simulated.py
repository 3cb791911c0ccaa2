"""Headless player that advances time from a clock."""

import time
from typing import Callable

from .base import MediaPlayer


class SimulatedPlayer(MediaPlayer):
    """A player with no video: position advances with the clock while playing."""

    def __init__(
        self,
        duration: float,
        rate: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.duration = duration
        self.rate = rate
        self.muted = False
        self._clock = clock
        self._position = 0.0
        self._started_at: float | None = None  # clock reading when play() was last called

    def current_time(self) -> float:
        if self._started_at is None:
            return self._position
        elapsed = (self._clock() - self._started_at) * self.rate
        return min(self._position + elapsed, self.duration)

    def seek(self, t: float):
        self._position = max(0.0, min(t, self.duration))
        if self._started_at is not None:
            self._started_at = self._clock()

    def play(self):
        if self._started_at is None:
            self._started_at = self._clock()

    def pause(self):
        if self._started_at is not None:
            self._position = self.current_time()
            self._started_at = None

    def set_muted(self, muted: bool):
        self.muted = muted

    @property
    def playing(self) -> bool:
        return self._started_at is not None and not self.ended

    @property
    def ended(self) -> bool:
        return self.current_time() >= self.duration
