"""Media player interface the time source adapts."""

from abc import ABC, abstractmethod


class MediaPlayer(ABC):
    """Anything that can report playback time and take seek/play/pause/mute commands."""

    @abstractmethod
    def current_time(self) -> float:
        """Current playback position in seconds."""
        pass

    @abstractmethod
    def seek(self, t: float):
        pass

    @abstractmethod
    def play(self):
        pass

    @abstractmethod
    def pause(self):
        pass

    @abstractmethod
    def set_muted(self, muted: bool):
        pass

    @property
    @abstractmethod
    def playing(self) -> bool:
        pass

    @property
    def ended(self) -> bool:
        return False
