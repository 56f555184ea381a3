from __future__ import annotations

import asyncio
from collections.abc import Callable  # noqa: TC003

import httpx
import pytest

from substance_import.adapters.http_resilience import RetryExhaustedError
from substance_import.config.http_resilience import LinearRetry, ResilienceConfig, RetryPolicy
from tests.helpers.http import make_client_factory


def _config(*, attempts: int = 3, backoff: float = 0.0) -> ResilienceConfig:
    return ResilienceConfig(
        name="test",
        retry=RetryPolicy(attempts=attempts, backoff_seconds=backoff),
    )


def _get(
    config: ResilienceConfig,
    handler: Callable[[httpx.Request], httpx.Response],
) -> httpx.Response:
    async def run() -> httpx.Response:
        async with make_client_factory(handler)(config) as client:
            return await client.get("https://example.test/resource")

    return asyncio.run(run())


def test_transient_statuses_are_retried() -> None:
    statuses = iter([503, 429, 200])
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(next(statuses), json={"ok": True}, request=request)

    response = _get(_config(), handler)

    assert response.status_code == 200
    assert len(calls) == 3


def test_retries_are_exhausted_after_three_attempts() -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(502, request=request)

    with pytest.raises(RetryExhaustedError) as excinfo:
        _get(_config(), handler)

    assert len(calls) == 3
    assert excinfo.value.attempts == 3
    assert excinfo.value.response is not None
    assert excinfo.value.response.status_code == 502


def test_network_errors_are_retried() -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        if len(attempts) < 2:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, request=request)

    response = _get(_config(), handler)

    assert response.status_code == 200
    assert len(attempts) == 2


def test_persistent_network_errors_raise_retry_exhausted() -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RetryExhaustedError) as excinfo:
        _get(_config(), handler)

    assert len(attempts) == 3
    assert isinstance(excinfo.value.cause, httpx.ConnectError)
    assert excinfo.value.response is None


def test_non_transient_statuses_are_returned_immediately() -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(404, request=request)

    response = _get(_config(), handler)

    assert response.status_code == 404
    assert len(calls) == 1


def test_built_retry_backs_off_linearly() -> None:
    retry = RetryPolicy(backoff_seconds=1.5).build()

    assert retry.total == 2
    first = retry.increment()
    second = first.increment()

    assert isinstance(second, LinearRetry)
    assert [first.backoff_strategy(), second.backoff_strategy()] == [1.5, 3.0]
    assert second.is_exhausted()


def test_linear_backoff_is_capped() -> None:
    retry = RetryPolicy(attempts=10, backoff_seconds=30.0, max_backoff_wait=45.0).build()

    for _ in range(3):
        retry = retry.increment()

    assert retry.backoff_strategy() == 45.0
