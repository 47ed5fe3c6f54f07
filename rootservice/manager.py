"""Thread-safe keyed store of shared objects."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any, Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class Manager(Generic[T]):
    """A locked mapping from string keys to objects, iterated in key order."""

    def __init__(self, factory: Callable[..., T]) -> None:
        self._factory = factory
        self._storage: dict[str, T] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> T | None:
        """The object stored under ``key``, or None."""
        with self._lock:
            return self._storage.get(key)

    def add(self, key: str, obj: T) -> bool:
        """Store ``obj`` unless ``key`` is taken; True if it was stored."""
        with self._lock:
            if key in self._storage:
                return False
            self._storage[key] = obj
            return True

    def add_new(self, key: str, *args: Any, **kwargs: Any) -> bool:
        """Build an object with the factory and ``add`` it."""
        return self.add(key, self._factory(*args, **kwargs))

    def set(self, key: str, obj: T) -> None:
        """Store ``obj`` under ``key``, replacing any existing object."""
        with self._lock:
            self._storage[key] = obj

    def set_new(self, key: str, *args: Any, **kwargs: Any) -> None:
        """Build an object with the factory and ``set`` it."""
        self.set(key, self._factory(*args, **kwargs))

    def update(self, key: str, obj: T) -> bool:
        """Replace the object under an existing ``key``; False if absent."""
        with self._lock:
            if key not in self._storage:
                return False
            self._storage[key] = obj
            return True

    def update_new(self, key: str, *args: Any, **kwargs: Any) -> bool:
        """Build an object with the factory and ``update`` with it."""
        return self.update(key, self._factory(*args, **kwargs))

    def delete(self, key: str) -> bool:
        """Remove ``key``; True if something was removed."""
        with self._lock:
            return self._storage.pop(key, _MISSING) is not _MISSING

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._storage

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._storage

    def __len__(self) -> int:
        with self._lock:
            return len(self._storage)

    def clear(self) -> None:
        with self._lock:
            self._storage.clear()

    def keys(self) -> list[str]:
        """All keys in sorted order."""
        with self._lock:
            return sorted(self._storage)

    def values(self) -> list[T]:
        """All objects, ordered by their keys."""
        with self._lock:
            return [self._storage[key] for key in sorted(self._storage)]

    def execute(self, key: str, func: Callable[[T], Any]) -> bool:
        """Call ``func`` on the object under ``key``; False if absent."""
        obj = self.get(key)
        if obj is None:
            return False
        func(obj)
        return True

    def execute_with(self, key: str, func: Callable[[T], R]) -> R | None:
        """Return ``func`` applied to the object under ``key``, or None."""
        obj = self.get(key)
        if obj is None:
            return None
        return func(obj)


_MISSING = object()