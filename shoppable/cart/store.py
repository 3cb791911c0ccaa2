"""String-keyed local stores for the cart snapshot."""

import json
from abc import ABC, abstractmethod
from pathlib import Path

from ..errors import PersistenceError


class KeyValueStore(ABC):
    """A get/set string store scoped to one user session."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        pass

    @abstractmethod
    def set(self, key: str, value: str):
        pass


class MemoryStore(KeyValueStore):
    """In-process store. Contents vanish with the process."""

    def __init__(self, data: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str):
        self.data[key] = value


class JsonFileStore(KeyValueStore):
    """Store backed by a single JSON object file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        # ValueError covers bad JSON and undecodable bytes
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Failed to read {self.path}: {e}")
        if not isinstance(data, dict):
            raise PersistenceError(f"Expected a JSON object in {self.path}")
        return data

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str):
        data = self._read_all()
        data[key] = value
        try:
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Failed to write {self.path}: {e}")
