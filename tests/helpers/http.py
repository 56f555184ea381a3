"""Helpers for exercising HTTP adapters against ``httpx.MockTransport``."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from substance_import.adapters.http_resilience import ResilientClient
from substance_import.config.http_resilience import RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Callable

    from substance_import.config.http_resilience import ResilienceConfig

NO_BACKOFF = RetryPolicy(attempts=3, backoff_seconds=0.0)


def make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        return ResilientClient(resilience, transport=httpx.MockTransport(async_handler))

    return factory
