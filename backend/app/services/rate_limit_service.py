"""
Rate Limit Service
Fixed-window request counters keyed by endpoint class and client IP.

Counters live in a `limits` storage (memory:// or redis://). One
RateLimitCounter is created per application and handed to every
EndpointLimiter built from it.
"""

import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Dict

from fastapi import Request
from limits import RateLimitItem, parse
from limits.storage import storage_from_string
from limits.strategies import FixedWindowRateLimiter

from app.config import Settings
from app.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


class RateLimitCounter:
    """Shared, keyed, time-windowed counter with atomic increment-and-check."""

    def __init__(self, storage_uri: str = "memory://"):
        self.storage = storage_from_string(storage_uri)
        self.strategy = FixedWindowRateLimiter(self.storage)

    def hit(self, item: RateLimitItem, scope: str, key: str) -> bool:
        """Count one request; False when the window was already full."""
        return self.strategy.hit(item, scope, key)

    def test(self, item: RateLimitItem, scope: str, key: str) -> bool:
        """True when one more request would be allowed, without counting it."""
        return self.strategy.test(item, scope, key)

    def retry_after(self, item: RateLimitItem, scope: str, key: str) -> int:
        reset_time, _ = self.strategy.get_window_stats(item, scope, key)
        return max(int(reset_time - time.time()), 1)

    def refund(self, item: RateLimitItem, scope: str, key: str) -> None:
        """Give back one counted request in the current window."""
        window_key = item.key_for(scope, key)
        if self.storage.get(window_key) > 0:
            self.storage.incr(window_key, item.get_expiry(), amount=-1)

    def reset(self) -> None:
        self.storage.reset()


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


@dataclass
class EndpointLimiter:
    """
    Limit for one endpoint class.

    With skip_successful, every request is counted before the handler runs
    and the count is given back once the handler succeeds, so only failed
    requests (failed logins) stay in the window.
    """

    counter: RateLimitCounter
    scope: str
    limit: str
    message: str
    skip_successful: bool = False
    enabled: bool = True

    def __post_init__(self):
        self.item = parse(self.limit)

    def _reject(self, key: str) -> RateLimitExceededError:
        logger.warning(f"Rate limit '{self.scope}' exceeded for {key}")
        return RateLimitExceededError(
            self.message,
            retry_after=self.counter.retry_after(self.item, self.scope, key),
        )

    @asynccontextmanager
    async def guard(self, request: Request):
        if not self.enabled:
            yield
            return

        key = client_ip(request)
        if not self.counter.hit(self.item, self.scope, key):
            raise self._reject(key)
        yield
        if self.skip_successful:
            self.counter.refund(self.item, self.scope, key)


def build_limiters(counter: RateLimitCounter, settings: Settings) -> Dict[str, EndpointLimiter]:
    """The four endpoint classes of the public API."""
    enabled = settings.rate_limit_enabled
    return {
        "general": EndpointLimiter(
            counter,
            scope="general",
            limit=settings.rate_limit_general,
            message="Too many requests from this IP, please try again later.",
            enabled=enabled,
        ),
        "auth": EndpointLimiter(
            counter,
            scope="auth",
            limit=settings.rate_limit_auth,
            message="Too many authentication attempts, please try again later.",
            skip_successful=True,
            enabled=enabled,
        ),
        "scan": EndpointLimiter(
            counter,
            scope="scan",
            limit=settings.rate_limit_scan,
            message="Too many scan requests, please wait a moment before trying again.",
            enabled=enabled,
        ),
        "account_creation": EndpointLimiter(
            counter,
            scope="account_creation",
            limit=settings.rate_limit_account_creation,
            message="Too many accounts created from this IP. Please try again later.",
            enabled=enabled,
        ),
    }
