"""Shared test doubles for MaxBot tests."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from typing import Any

import httpx

from maxbot.config import PollingConfig, RetryConfig, Settings
from maxbot.models import WebhookEvent

BASE_URL = "https://api.test"
API_KEY = "test-key"


class FakeSleep:
    """Records requested delays instead of sleeping."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def total(self) -> float:
        return sum(self.calls)


class RecordingHandler:
    """httpx.MockTransport handler that records requests.

    ``responses`` are consumed in order; once exhausted the last entry is
    reused. Entries may be httpx.Response objects (copied per request),
    httpx.TransportError subclasses (raised with the request attached) or
    callables taking the request.
    """

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses) or [httpx.Response(200, json={})]
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        entry = self.responses[min(len(self.requests), len(self.responses)) - 1]
        if isinstance(entry, type) and issubclass(entry, httpx.TransportError):
            raise entry("simulated failure", request=request)
        if isinstance(entry, httpx.Response):
            return httpx.Response(entry.status_code, headers=entry.headers, content=entry.content)
        return entry(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


def make_settings(**overrides: Any) -> Settings:
    """Settings isolated from the environment."""
    values: dict[str, Any] = {
        "api_key": API_KEY,
        "base_url": BASE_URL,
        "retry": RetryConfig(retry_delay=1.0, rate_limit_delay=5.0),
        "polling": PollingConfig(retry_delay=0.0),
    }
    values.update(overrides)
    return Settings.model_validate(values)


def make_event(update_id: int, type: str = "message", **fields: Any) -> WebhookEvent:
    return WebhookEvent(update_id=update_id, event_id=f"evt_{update_id}", type=type, **fields)


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Yield to the loop until ``predicate`` holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.001)
