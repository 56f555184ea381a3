"""Configuration types for resilient HTTP clients."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Self

import httpx
from httpx_retries import Retry

if TYPE_CHECKING:
    from collections.abc import Mapping


class LinearRetry(Retry):
    """``Retry`` whose n-th retry waits ``n * backoff_factor`` seconds, without jitter."""

    def backoff_strategy(self) -> float:
        return min(self.attempts_made * self.backoff_factor, self.max_backoff_wait)

    def increment(self) -> Self:
        # Copy instead of re-constructing so the subclass survives each attempt.
        incremented = copy.copy(self)
        incremented.attempts_made = self.attempts_made + 1
        return incremented


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Up to ``attempts`` tries in total; retry ``n`` waits ``n * backoff_seconds``."""

    attempts: int = 3
    backoff_seconds: float = 1.0
    max_backoff_wait: float = 60.0
    respect_retry_after_header: bool = True
    allowed_methods: frozenset[str] = field(
        default_factory=lambda: frozenset({"GET", "HEAD", "OPTIONS"})
    )
    status_forcelist: frozenset[int] = field(
        default_factory=lambda: frozenset({408, 425, 429, 500, 502, 503, 504})
    )
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )

    def build(self) -> LinearRetry:
        return LinearRetry(
            total=max(0, self.attempts - 1),
            backoff_factor=self.backoff_seconds,
            max_backoff_wait=self.max_backoff_wait,
            respect_retry_after_header=self.respect_retry_after_header,
            allowed_methods=tuple(self.allowed_methods),
            status_forcelist=tuple(self.status_forcelist),
            retry_on_exceptions=self.retry_on_exceptions,
            backoff_jitter=0.0,
        )


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    default_headers: Mapping[str, str] | None = None
