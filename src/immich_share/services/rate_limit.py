"""Fixed-window rate limiting."""

import asyncio
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

logger = logging.getLogger(__name__)

SWEEP_INTERVAL_SECONDS = 5 * 60


@dataclass(frozen=True)
class RateLimitPolicy:
    """A request budget per identifier and window."""

    prefix: str
    max_requests: int
    window_ms: int

    def key(self, identifier: str) -> str:
        return f"{self.prefix}-{identifier}"


AUTH_POLICY = RateLimitPolicy(prefix="auth", max_requests=5, window_ms=15 * 60 * 1000)
UPLOAD_POLICY = RateLimitPolicy(prefix="upload", max_requests=1, window_ms=60 * 1000)


@dataclass(frozen=True)
class RateLimitResult:
    """Decision for a single rate limit check."""

    allowed: bool
    remaining: int
    reset_time: int


@dataclass
class _RateLimitEntry:
    count: int
    reset_time: int


def _now_ms() -> int:
    return int(time.time() * 1000)


class RateLimiter:
    """In-process fixed-window counter keyed by an arbitrary identifier.

    Counters live in memory only, so a restart resets them. Each check runs
    its read-increment-write under a lock.
    """

    def __init__(self, clock: Callable[[], int] = _now_ms) -> None:
        self._clock = clock
        self._entries: dict[str, _RateLimitEntry] = {}
        self._lock = threading.Lock()

    def check(
        self, identifier: str, max_requests: int, window_ms: int
    ) -> RateLimitResult:
        """Count one attempt and decide whether it may proceed."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(identifier)
            if entry is not None and now > entry.reset_time:
                del self._entries[identifier]
                entry = None

            if entry is None:
                reset_time = now + window_ms
                self._entries[identifier] = _RateLimitEntry(
                    count=1, reset_time=reset_time
                )
                return RateLimitResult(
                    allowed=True, remaining=max_requests - 1, reset_time=reset_time
                )

            if entry.count >= max_requests:
                return RateLimitResult(
                    allowed=False, remaining=0, reset_time=entry.reset_time
                )

            entry.count += 1
            return RateLimitResult(
                allowed=True,
                remaining=max_requests - entry.count,
                reset_time=entry.reset_time,
            )

    def check_policy(self, policy: RateLimitPolicy, identifier: str) -> RateLimitResult:
        """Check ``identifier`` against a named policy."""
        return self.check(policy.key(identifier), policy.max_requests, policy.window_ms)

    def sweep(self) -> int:
        """Drop expired windows and return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [
                key for key, entry in self._entries.items() if now > entry.reset_time
            ]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)


def rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    """Return the headers describing a rate limit decision."""
    reset = datetime.fromtimestamp(result.reset_time / 1000, tz=UTC)
    return {
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": reset.isoformat(timespec="milliseconds").replace(
            "+00:00", "Z"
        ),
    }


async def run_periodic_sweep(
    limiter: RateLimiter, interval_seconds: float = SWEEP_INTERVAL_SECONDS
) -> None:
    """Sweep ``limiter`` forever; cancel the task to stop."""
    while True:
        await asyncio.sleep(interval_seconds)
        removed = limiter.sweep()
        if removed:
            logger.info("Swept %s expired rate limit entries", removed)
