"""
Progress storage interface.

A store maps a problem key (``"<group id>.<problem number>"``) to the
serialized (camelCase) form of its ``ProblemState``.  Both calls must be
durable at the granularity of one call.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional
import copy
import threading


class ProgressStore(ABC):
    """Abstract key-value store for problem progress"""

    @abstractmethod
    def get(self, key: str) -> Optional[dict[str, Any]]:
        """Stored snapshot for ``key``, or None"""
        pass

    @abstractmethod
    def put(self, key: str, snapshot: dict[str, Any]) -> None:
        """Store ``snapshot`` under ``key``"""
        pass

    @abstractmethod
    def delete(self, keys: Iterable[str]) -> None:
        """Remove the snapshots of ``keys``; unknown keys are ignored"""
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """All stored keys"""
        pass


class InMemoryProgressStore(ProgressStore):
    """
    Dictionary-backed store.

    Snapshots are deep-copied in and out so callers never share mutable
    state with the store.
    """

    def __init__(self, initial: Optional[dict[str, dict[str, Any]]] = None):
        self._data: dict[str, dict[str, Any]] = copy.deepcopy(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[dict[str, Any]]:
        with self._lock:
            snapshot = self._data.get(key)
            return copy.deepcopy(snapshot) if snapshot is not None else None

    def put(self, key: str, snapshot: dict[str, Any]) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(snapshot)

    def delete(self, keys: Iterable[str]) -> None:
        with self._lock:
            for key in keys:
                self._data.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._data)
