"""
Submitted-URL cache for the IndexNow client.

Records when each URL was last accepted by at least one endpoint so that
resubmissions inside the TTL can be skipped. Expiry is lazy: an entry is
checked and evicted when it is read, never swept in the background.
"""

import time
from typing import Callable, Iterable

from .config import CacheConfig


class URLCache:
    """
    Time-bounded membership set of recently submitted URLs.

    Keys are exact, case-sensitive URL strings.
    """

    def __init__(
        self,
        config: CacheConfig,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the cache.

        Args:
            config: Cache configuration (enabled flag and TTL)
            clock: Time source in seconds; injectable for tests
        """
        self._config = config
        self._clock = clock
        self._entries: dict[str, float] = {}

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def has(self, url: str) -> bool:
        """
        Check whether a URL was submitted within the TTL.

        Expired entries are evicted as a side effect.
        """
        if not self._config.enabled:
            return False

        submitted_at = self._entries.get(url)
        if submitted_at is None:
            return False

        if self._clock() - submitted_at > self._config.ttl_seconds:
            del self._entries[url]
            return False

        return True

    def add(self, url: str) -> None:
        if self._config.enabled:
            self._entries[url] = self._clock()

    def add_batch(self, urls: Iterable[str]) -> None:
        if self._config.enabled:
            now = self._clock()
            for url in urls:
                self._entries[url] = now

    def clear(self) -> None:
        self._entries.clear()

    def size(self) -> int:
        """Stored entries, including expired ones not yet evicted."""
        return len(self._entries)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, url: str) -> bool:
        return self.has(url)
