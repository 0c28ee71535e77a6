"""UrlRotation: round-robin over the base URLs of a server."""

from __future__ import annotations

import threading
from collections.abc import Iterable

from .exceptions import ConfigurationError


class UrlRotation:
    """Endless, restartable sequence cycling through a fixed list of URLs.

    ``next()`` never raises ``StopIteration``. Safe to share between threads.
    """

    def __init__(self, urls: Iterable[str]) -> None:
        self._urls = tuple(urls)
        if not self._urls:
            raise ConfigurationError("UrlRotation requires at least one URL")
        self._index = 0
        self._lock = threading.Lock()

    @property
    def urls(self) -> tuple[str, ...]:
        return self._urls

    def __iter__(self) -> UrlRotation:
        return self

    def __next__(self) -> str:
        with self._lock:
            url = self._urls[self._index]
            self._index = (self._index + 1) % len(self._urls)
        return url

    def reset(self) -> None:
        """Restart from the first URL."""
        with self._lock:
            self._index = 0
