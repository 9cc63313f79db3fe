"""Process-level read-through cache keyed by entity id."""

import copy
import threading
from collections.abc import Callable, Hashable
from typing import Any


class ReadThroughCache:
    """Holds deep copies, so callers can mutate what they get back.

    Every ``invalidate`` and ``clear`` bumps a generation counter. A load that
    started before the bump returns its value to the caller but is not
    stored, so a slow reader cannot put back an entry that a writer has just
    evicted.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: dict[Hashable, Any] = {}
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def get_or_load(self, key: Hashable, loader: Callable[[], Any]) -> Any:
        with self._lock:
            if key in self._entries:
                return copy.deepcopy(self._entries[key])
            started_at = self._generation

        value = loader()
        if value is not None:
            with self._lock:
                if self._generation == started_at:
                    self._entries[key] = copy.deepcopy(value)
        return value

    def invalidate(self, key: Hashable) -> None:
        with self._lock:
            self._generation += 1
            self._entries.pop(key, None)

    def invalidate_many(self, keys) -> None:
        with self._lock:
            self._generation += 1
            for key in keys:
                self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._generation += 1
            self._entries.clear()

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
