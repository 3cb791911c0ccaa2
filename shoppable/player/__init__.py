"""Playback time source and player adapters."""

from .base import MediaPlayer
from .simulated import SimulatedPlayer
from .time_source import PlaybackTimeSource, PlayerHandle

__all__ = ["MediaPlayer", "PlaybackTimeSource", "PlayerHandle", "SimulatedPlayer"]
