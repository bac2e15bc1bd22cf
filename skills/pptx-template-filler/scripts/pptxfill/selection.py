"""Randomised template selection without back-to-back repeats."""

from __future__ import annotations

import random
from collections import deque
from typing import Any, Callable, Deque, Dict, Hashable, List, Optional, Sequence


class TemplatePool:
    """Dispense template slides in shuffled cycles.

    One pool lives for one outline scope (all parts, or the chapters of one
    part). Every candidate is dispensed once per cycle, and the same candidate
    is never dispensed twice in a row while an alternative exists.
    """

    def __init__(self, rng: Optional[random.Random] = None, key: Callable[[Any], Hashable] = id):
        self.rng = rng or random.Random()
        self.key = key
        self._queue: Deque[Any] = deque()
        self._last: Optional[Any] = None

    @property
    def last(self) -> Optional[Any]:
        return self._last

    def _dedupe(self, candidates: Sequence[Any]) -> Dict[Hashable, Any]:
        unique: Dict[Hashable, Any] = {}
        for candidate in candidates:
            unique.setdefault(self.key(candidate), candidate)
        return unique

    def _is_last(self, item: Any) -> bool:
        return self._last is not None and self.key(item) == self.key(self._last)

    def _shuffled(self, items: List[Any]) -> List[Any]:
        shuffled = list(items)
        self.rng.shuffle(shuffled)
        if len(shuffled) > 1 and self._is_last(shuffled[0]):
            swap = self.rng.randrange(1, len(shuffled))
            shuffled[0], shuffled[swap] = shuffled[swap], shuffled[0]
        return shuffled

    def next(self, candidates: Sequence[Any]) -> Optional[Any]:
        """Return the next candidate to clone, or ``None`` when there are none."""
        unique = self._dedupe(candidates)
        if not unique:
            return None

        # Candidate sets differ between calls (e.g. by section count); drop stale entries.
        self._queue = deque(item for item in self._queue if self.key(item) in unique)
        if not self._queue:
            self._queue.extend(self._shuffled(list(unique.values())))

        item = self._queue.popleft()
        if len(unique) > 1:
            for _ in range(len(self._queue)):
                if not self._is_last(item):
                    break
                self._queue.append(item)
                item = self._queue.popleft()

        if len(unique) > 1 and self._is_last(item):
            # Only the last-dispensed candidate was queued; start a fresh cycle instead.
            self._queue.appendleft(item)
            item = next(c for c in self._shuffled(list(unique.values())) if not self._is_last(c))
            self._queue = deque(c for c in self._queue if self.key(c) != self.key(item))

        self._last = item
        return item
