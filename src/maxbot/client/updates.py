"""Update operations: one-shot fetch and long-polling sessions."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from maxbot.models import WebhookEvent

if TYPE_CHECKING:
    from maxbot.config import PollingConfig
    from maxbot.polling import LongPoller, PollingSession


class UpdatesMixin:
    """Mixin providing update operations for MaxBotClient.

    This mixin expects the following attributes/methods from the base class:
    - _call(method, path, body, *, params, response_model, cancel)
    - _path(*segments) -> str
    - _poller: LongPoller
    """

    # These will be provided by the base class
    _call: Any
    _path: Any
    _poller: LongPoller

    async def get_updates(
        self,
        offset: int = 0,
        *,
        cancel: asyncio.Event | None = None,
    ) -> list[WebhookEvent]:
        """Fetch pending events at or after ``offset`` without waiting."""
        return await self._call(
            "GET",
            self._path("updates"),
            params={"offset": offset},
            response_model=list[WebhookEvent],
            cancel=cancel,
        )

    def start_polling(
        self,
        config: PollingConfig | None = None,
        stop_event: asyncio.Event | None = None,
    ) -> PollingSession:
        """Start a background long-polling session.

        Must be called from a running event loop. The session is not
        wrapped by the retry policy: failed fetches surface as error
        records on the session and the loop keeps going until stopped.

        Args:
            config: Session settings; defaults to ``settings.polling``.
            stop_event: External cancellation signal.

        Returns:
            The running PollingSession.
        """
        return self._poller.start(config=config, stop_event=stop_event)
