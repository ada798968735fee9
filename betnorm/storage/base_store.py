import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class StorageError(Exception):
    """Custom exception for collection persistence failures."""

    pass


class CollectionStore(ABC):
    """Get/set of whole JSON-compatible collections under stable keys."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Returns the stored value, or None when the key has never been written."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Replaces the value stored under ``key``."""
        pass


class MemoryStore(CollectionStore):
    """Process-local store; values are deep-copied in and out."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self._data.get(key))

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)
