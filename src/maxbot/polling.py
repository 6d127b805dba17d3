"""Long-polling update stream.

A polling session is one background asyncio task that repeatedly asks the
platform for events at or after its cursor and hands them, one at a time,
to a bounded delivery queue. The consumer iterates the session:

    ```python
    async with client.start_polling() as session:
        async for update in session:
            if update.error is not None:
                log.warning("poll failed", error=str(update.error))
                continue
            await handle(update.event)
    ```

Delivery guarantees:
- Events reach the queue in fetch order; the cursor only moves forward and
  only after the event was accepted by the queue, so backpressure from a
  slow consumer stalls the poll loop instead of dropping events.
- Error records are best-effort: if the queue is full they are dropped
  rather than blocking the loop.
- An event that was fetched but not yet queued when the session stops is
  lost; the next session resumes from ``session.offset`` and the platform
  redelivers it.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable
from dataclasses import dataclass
from typing import TypeVar

from maxbot.config import PollingConfig
from maxbot.exceptions import MaxBotError
from maxbot.logging import get_logger
from maxbot.models import UpdatesResponse, WebhookEvent
from maxbot.transport import Transport

logger = get_logger(__name__)

T = TypeVar("T")

# Added to the server-side wait so the HTTP read does not time out first
REQUEST_TIMEOUT_MARGIN = 10.0


@dataclass(frozen=True, slots=True)
class PollingUpdate:
    """One record on the delivery queue.

    Exactly one of ``event`` and ``error`` is set. Error records carry no
    update id.
    """

    update_id: int | None = None
    event: WebhookEvent | None = None
    error: MaxBotError | None = None

    def __post_init__(self) -> None:
        if (self.event is None) == (self.error is None):
            raise ValueError("PollingUpdate needs exactly one of event or error")

    @classmethod
    def for_event(cls, event: WebhookEvent) -> PollingUpdate:
        return cls(update_id=event.update_id, event=event)

    @classmethod
    def for_error(cls, error: MaxBotError) -> PollingUpdate:
        return cls(error=error)


class _Stopped(Exception):
    """Stop fired while the worker was waiting."""


class PollingSession:
    """Running long-poll worker plus its delivery queue.

    Iterating the session yields PollingUpdate records until the worker has
    stopped and the queue is drained.
    """

    def __init__(
        self,
        transport: Transport,
        config: PollingConfig,
        api_prefix: str,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        self._transport = transport
        self._config = config
        self._path = f"{api_prefix}/getUpdates"
        self._stop = stop_event or asyncio.Event()
        self._queue: asyncio.Queue[PollingUpdate] = asyncio.Queue(maxsize=config.buffer_size)
        self._offset = config.update_offset
        self._task: asyncio.Task[None] | None = None

    @property
    def offset(self) -> int:
        """Next update id to request."""
        return self._offset

    @property
    def queue(self) -> asyncio.Queue[PollingUpdate]:
        return self._queue

    @property
    def task(self) -> asyncio.Task[None] | None:
        """Worker task; cancelling it stops the session like ``stop()``."""
        return self._task

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> PollingSession:
        """Launch the worker task on the running loop."""
        if self._task is not None:
            raise RuntimeError("polling session already started")
        self._task = asyncio.create_task(self._run(), name="maxbot-polling")
        return self

    def stop(self) -> None:
        """Signal the worker to stop. Safe to call more than once."""
        self._stop.set()

    async def aclose(self) -> None:
        """Stop the worker and wait for it to finish."""
        self.stop()
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    async def __aenter__(self) -> PollingSession:
        if self._task is None:
            self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def __aiter__(self) -> AsyncIterator[PollingUpdate]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[PollingUpdate]:
        if self._task is None:
            raise RuntimeError("polling session not started")
        while True:
            if not self._queue.empty():
                yield self._queue.get_nowait()
                continue
            if self._task.done():
                if not self._task.cancelled() and self._task.exception() is not None:
                    raise self._task.exception()  # type: ignore[misc]
                return
            getter = asyncio.ensure_future(self._queue.get())
            try:
                await asyncio.wait({getter, self._task}, return_when=asyncio.FIRST_COMPLETED)
            except asyncio.CancelledError:
                getter.cancel()
                raise
            if getter.done():
                yield getter.result()
            else:
                # Worker finished first; a cancelled get leaves items in the queue
                getter.cancel()

    async def _run(self) -> None:
        logger.info("Polling started", offset=self._offset, timeout=self._config.timeout)
        try:
            while not self._stop.is_set():
                try:
                    response = await self._until_stopped(self._fetch())
                except _Stopped:
                    break
                except MaxBotError as e:
                    logger.warning("Polling request failed", offset=self._offset, error=str(e))
                    self._offer_error(e)
                    await self._pause()
                    continue

                if not response.ok:
                    logger.warning("Polling response not OK", offset=self._offset)
                    await self._pause()
                    continue

                if not await self._deliver_batch(response.result):
                    break
        finally:
            logger.info("Polling stopped", offset=self._offset)

    async def _fetch(self) -> UpdatesResponse:
        return await self._transport.execute(
            "GET",
            self._path,
            params={"offset": self._offset, "timeout": self._config.timeout},
            response_model=UpdatesResponse,
            timeout=self._config.timeout + REQUEST_TIMEOUT_MARGIN,
        )

    async def _deliver_batch(self, events: list[WebhookEvent]) -> bool:
        """Queue events in order, advancing the cursor after each.

        Returns:
            False if stop fired mid-batch.
        """
        for event in events:
            try:
                await self._until_stopped(self._queue.put(PollingUpdate.for_event(event)))
            except _Stopped:
                logger.info(
                    "Polling stopped during delivery",
                    offset=self._offset,
                    undelivered_update_id=event.update_id,
                )
                return False
            self._offset = event.update_id + 1
            if self._stop.is_set():
                return False
        return True

    def _offer_error(self, error: MaxBotError) -> None:
        try:
            self._queue.put_nowait(PollingUpdate.for_error(error))
        except asyncio.QueueFull:
            logger.debug("Delivery queue full, dropping error record", error=str(error))

    async def _pause(self) -> None:
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=self._config.retry_delay)
        except TimeoutError:
            pass

    async def _until_stopped(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless stop fires first.

        Raises:
            _Stopped: If stop fired before the awaitable completed; the
                awaitable is cancelled.
        """
        if self._stop.is_set():
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise _Stopped
        work = asyncio.ensure_future(awaitable)
        stopper = asyncio.ensure_future(self._stop.wait())
        try:
            await asyncio.wait({work, stopper}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            work.cancel()
            raise
        finally:
            stopper.cancel()
        if work.done():
            return work.result()
        work.cancel()
        await asyncio.gather(work, return_exceptions=True)
        raise _Stopped


class LongPoller:
    """Factory for polling sessions bound to one transport."""

    def __init__(
        self,
        transport: Transport,
        config: PollingConfig | None = None,
        api_prefix: str = "/api/v1",
    ) -> None:
        self._transport = transport
        self._config = config or PollingConfig()
        self._api_prefix = api_prefix

    def start(
        self,
        config: PollingConfig | None = None,
        stop_event: asyncio.Event | None = None,
    ) -> PollingSession:
        """Start a polling session.

        Args:
            config: Session settings; defaults to the poller's config.
            stop_event: External cancellation signal. The session creates
                its own when omitted; call ``session.stop()`` to set it.

        Returns:
            The running session.
        """
        session = PollingSession(
            self._transport,
            config or self._config,
            self._api_prefix,
            stop_event=stop_event,
        )
        return session.start()
