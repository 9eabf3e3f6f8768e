"""Sequence counters keyed by factory type and attribute name."""

from __future__ import annotations

import logging
import threading

logger = logging.getLogger(__name__)


class SequenceStore:
    """Monotonic counters, one per (factory type, attribute name).

    The first value handed out for a key is 1. Counters are never reset
    implicitly; ``reset`` exists for test isolation.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[tuple[type, str], int] = {}

    def next_value(self, definition_type: type, name: str) -> int:
        """Advance and return the counter for the given key."""
        key = (definition_type, name)
        with self._lock:
            value = self._counters.get(key, 0) + 1
            self._counters[key] = value
        logger.debug("Sequence %s.%s -> %d", definition_type.__name__, name, value)
        return value

    def peek(self, definition_type: type, name: str) -> int:
        """Return the last value handed out for the key (0 if never used)."""
        with self._lock:
            return self._counters.get((definition_type, name), 0)

    def reset(self, definition_type: type | None = None) -> None:
        """Clear counters for one factory type, or all of them."""
        with self._lock:
            if definition_type is None:
                self._counters.clear()
            else:
                for key in [k for k in self._counters if k[0] is definition_type]:
                    del self._counters[key]

    def __repr__(self) -> str:
        return f"SequenceStore(keys={len(self._counters)})"


default_store = SequenceStore()
