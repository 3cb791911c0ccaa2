"""Shoppable video: product overlays synchronized with video playback."""
