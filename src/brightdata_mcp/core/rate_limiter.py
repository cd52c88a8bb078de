"""Per-tool fixed-window rate limiting."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from brightdata_mcp.config import DEFAULT_RATE_LIMIT_REQUESTS, DEFAULT_RATE_LIMIT_WINDOW
from brightdata_mcp.errors import RateLimitExceeded

logger = logging.getLogger(__name__)


@dataclass
class RateLimitBucket:
    """Window start and counter for one tool name, guarded by its own lock."""

    window_start: float | None = None
    count: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class RateLimiter:
    """Fixed-window counter keyed by tool name.

    Each bucket admits at most ``max_requests`` calls per ``window_seconds``.
    Check-and-record is atomic per bucket; different buckets never share a
    lock. The registry lock only guards creating a bucket and is never held
    while a bucket is being evaluated.
    """

    def __init__(
        self,
        max_requests: int = DEFAULT_RATE_LIMIT_REQUESTS,
        window_seconds: float = DEFAULT_RATE_LIMIT_WINDOW,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._buckets: dict[str, RateLimitBucket] = {}
        self._registry_lock = threading.Lock()

    def _bucket(self, name: str) -> RateLimitBucket:
        bucket = self._buckets.get(name)
        if bucket is None:
            with self._registry_lock:
                bucket = self._buckets.setdefault(name, RateLimitBucket())
        return bucket

    def check_and_record(self, name: str) -> None:
        """Admit one call for ``name`` or raise.

        Raises:
            RateLimitExceeded: If the current window is exhausted; carries the
                seconds remaining until the window expires
        """
        bucket = self._bucket(name)
        with bucket.lock:
            now = self._clock()
            if bucket.window_start is None or now > bucket.window_start + self.window_seconds:
                bucket.window_start = now
                bucket.count = 1
                return

            if bucket.count >= self.max_requests:
                retry_after = bucket.window_start + self.window_seconds - now
                logger.debug(f"Bucket {name} exhausted, retry after {retry_after:.2f}s")
                raise RateLimitExceeded(retry_after)

            bucket.count += 1

    def remaining(self, name: str) -> int:
        """Calls still admissible for ``name`` in its current window."""
        bucket = self._buckets.get(name)
        if bucket is None:
            return self.max_requests
        with bucket.lock:
            if (
                bucket.window_start is None
                or self._clock() > bucket.window_start + self.window_seconds
            ):
                return self.max_requests
            return self.max_requests - bucket.count

    def reset(self) -> None:
        with self._registry_lock:
            self._buckets.clear()
