"""Client base: settings, transport and retry wiring shared by all mixins."""

from __future__ import annotations

import asyncio
from typing import Any
from urllib.parse import quote

import httpx

from maxbot.config import Settings
from maxbot.exceptions import InvalidIdentifierError
from maxbot.polling import LongPoller
from maxbot.retry import RetryPolicy, SleepFunc
from maxbot.transport import Transport


class ClientBase:
    """Base class for the MaxBot client.

    Provides:
    - Settings resolution (explicit settings, keyword overrides, environment)
    - Transport and RetryPolicy construction
    - Path building and identifier validation
    - Lifecycle management of the underlying HTTP client
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        sleep: SleepFunc | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Client settings. Read from MAXBOT_* environment
                variables when omitted.
            api_key: Overrides ``settings.api_key``.
            base_url: Overrides ``settings.base_url``.
            http_client: Preconfigured httpx.AsyncClient to share. The
                caller keeps ownership and must close it.
            sleep: Awaitable sleep used between retry attempts.

        Raises:
            ConfigurationError: If no API key is available.
        """
        overrides: dict[str, Any] = {}
        if api_key is not None:
            overrides["api_key"] = api_key
        if base_url is not None:
            overrides["base_url"] = base_url

        if settings is None:
            settings = Settings(**overrides)
        elif overrides:
            settings = Settings.model_validate({**settings.model_dump(), **overrides})

        self._settings = settings
        self._transport = Transport(settings, http_client=http_client)
        self._retry = RetryPolicy(settings.retry, sleep=sleep)
        self._poller = LongPoller(self._transport, settings.polling, settings.api_prefix)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry

    def _path(self, *segments: str) -> str:
        """Build a versioned path, escaping each segment."""
        return "/".join([self._settings.api_prefix, *(quote(s, safe="") for s in segments)])

    @staticmethod
    def _require_id(value: str, name: str) -> str:
        """Reject blank identifiers before any request is made."""
        if not isinstance(value, str) or not value.strip():
            raise InvalidIdentifierError(f"invalid {name}: {value!r}")
        return value

    async def _call(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        params: dict[str, Any] | None = None,
        response_model: Any = None,
        cancel: asyncio.Event | None = None,
    ) -> Any:
        """Execute one request under the retry policy."""
        return await self._retry.run(
            lambda: self._transport.execute(
                method,
                path,
                body,
                params=params,
                response_model=response_model,
            ),
            cancel=cancel,
        )

    async def aclose(self) -> None:
        """Close the HTTP client if the client created it."""
        await self._transport.aclose()
