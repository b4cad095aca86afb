"""Randomness sources for scope-slot and seed selection."""

from __future__ import annotations

import random
import threading
from typing import Protocol, runtime_checkable


@runtime_checkable
class RandomSource(Protocol):
    """Anything that can draw a uniform integer from an inclusive range.

    ``random.Random`` satisfies this protocol.
    """

    def randint(self, a: int, b: int) -> int: ...


class LockedRandom:
    """``random.Random`` guarded by a lock so any thread may draw from it."""

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed
        self._random = random.Random(seed)
        self._lock = threading.Lock()

    def randint(self, a: int, b: int) -> int:
        with self._lock:
            return self._random.randint(a, b)

    def __repr__(self) -> str:
        return f"LockedRandom(seed={self.seed!r})"
