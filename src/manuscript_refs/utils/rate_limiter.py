"""Rate limiting utilities for API requests."""
import threading
import time
from typing import List


class RateLimiter:
    """Simple rate limiter for API requests used as a context manager."""

    def __init__(self, max_calls: int, period: float):
        """
        Initialize rate limiter.

        Args:
            max_calls: Maximum number of calls allowed in the period
            period: Time period in seconds
        """
        self.max_calls = max_calls
        self.period = period
        self.calls: List[float] = []
        self._lock = threading.Lock()

    def __enter__(self):
        """Context manager entry - wait if needed before proceeding."""
        self._wait_if_needed()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - record the call time."""
        with self._lock:
            self.calls.append(time.time())
            self._cleanup()

    def _wait_if_needed(self) -> None:
        """Wait if rate limit would be exceeded."""
        with self._lock:
            now = time.time()
            self._cleanup()
            sleep_time = 0.0
            if len(self.calls) >= self.max_calls:
                sleep_time = self.calls[0] + self.period - now
        if sleep_time > 0:
            time.sleep(sleep_time)

    def _cleanup(self) -> None:
        """Remove old timestamps from the call history."""
        now = time.time()
        self.calls = [t for t in self.calls if now - t < self.period]


# Default rate limiters for the metadata APIs
CROSSREF_RATE_LIMITER = RateLimiter(max_calls=50, period=1)  # 50 requests per second
SEMANTIC_SCHOLAR_RATE_LIMITER = RateLimiter(max_calls=100, period=300)  # public tier
