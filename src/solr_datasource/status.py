"""Status counters reported to the hosting framework."""

from __future__ import annotations

import threading
from collections import Counter
from typing import Protocol, runtime_checkable


@runtime_checkable
class IStatusCounter(Protocol):
    """Protocol for the framework's status object."""

    def increment(self, name: str, amount: int = 1) -> None:
        """Add ``amount`` to counter ``name``."""
        ...


class InMemoryStatusCounter:
    """Thread-safe in-process counters."""

    def __init__(self) -> None:
        self._counts: Counter[str] = Counter()
        self._lock = threading.Lock()

    def increment(self, name: str, amount: int = 1) -> None:
        with self._lock:
            self._counts[name] += amount

    def get(self, name: str) -> int:
        with self._lock:
            return self._counts[name]

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counts)
