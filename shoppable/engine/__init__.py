"""Playback synchronization: visibility and collapse state."""

from .collapse import (
    CollapseController,
    CollapseState,
    TickResult,
    initial_state,
    reduce_tick,
    reduce_toggle,
)
from .visibility import compute_active

__all__ = [
    "CollapseController",
    "CollapseState",
    "TickResult",
    "compute_active",
    "initial_state",
    "reduce_tick",
    "reduce_toggle",
]
