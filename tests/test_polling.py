"""Tests for the long-polling session."""

import asyncio

import httpx
import pytest

from maxbot.config import PollingConfig
from maxbot.exceptions import DecodeError, NetworkError, ServerError
from maxbot.models import UpdatesResponse
from maxbot.polling import LongPoller, PollingSession, PollingUpdate
from maxbot.transport import Transport

from helpers import make_event, make_settings, wait_until


class FakePollTransport:
    """Transport double returning scripted getUpdates outcomes.

    Once the script is exhausted every call blocks, like a long-poll the
    server holds open.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls: list[dict] = []

    async def execute(self, method, path, body=None, *, params=None, response_model=None, timeout=None):
        self.calls.append(
            {
                "method": method,
                "path": path,
                "params": dict(params or {}),
                "response_model": response_model,
                "timeout": timeout,
            }
        )
        if not self.outcomes:
            await asyncio.Event().wait()
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def ok(*update_ids: int) -> UpdatesResponse:
    return UpdatesResponse(ok=True, result=[make_event(i) for i in update_ids])


def start(transport, **config) -> PollingSession:
    config.setdefault("retry_delay", 0.0)
    return LongPoller(transport, PollingConfig(**config)).start()


async def take(session: PollingSession, count: int) -> list[PollingUpdate]:
    async def collect():
        updates = []
        async for update in session:
            updates.append(update)
            if len(updates) == count:
                break
        return updates

    return await asyncio.wait_for(collect(), timeout=2.0)


async def drain(session: PollingSession) -> list[PollingUpdate]:
    async def collect():
        return [update async for update in session]

    return await asyncio.wait_for(collect(), timeout=2.0)


class TestPollingUpdate:
    def test_event_record(self):
        update = PollingUpdate.for_event(make_event(9))
        assert update.update_id == 9
        assert update.error is None

    def test_error_record_has_no_update_id(self):
        update = PollingUpdate.for_error(NetworkError("reset"))
        assert update.update_id is None
        assert update.event is None

    def test_requires_exactly_one_payload(self):
        with pytest.raises(ValueError):
            PollingUpdate()
        with pytest.raises(ValueError):
            PollingUpdate(event=make_event(1), error=NetworkError("reset"))


class TestCursor:
    """Tests for ordering and cursor advancement."""

    @pytest.mark.asyncio
    async def test_delivers_in_order_and_advances_cursor(self):
        transport = FakePollTransport(ok(1, 2), ok(5))
        session = start(transport)

        updates = await take(session, 3)
        await session.aclose()

        assert [u.update_id for u in updates] == [1, 2, 5]
        assert session.offset == 6
        assert transport.calls[0]["params"]["offset"] == 0
        assert transport.calls[1]["params"]["offset"] == 3

    @pytest.mark.asyncio
    async def test_request_shape(self):
        transport = FakePollTransport()
        session = start(transport, timeout=25)

        await wait_until(lambda: len(transport.calls) == 1)
        await session.aclose()

        call = transport.calls[0]
        assert call["method"] == "GET"
        assert call["path"] == "/api/v1/getUpdates"
        assert call["params"] == {"offset": 0, "timeout": 25}
        assert call["response_model"] is UpdatesResponse
        assert call["timeout"] == 35.0

    @pytest.mark.asyncio
    async def test_starts_from_configured_offset(self):
        transport = FakePollTransport()
        session = start(transport, update_offset=40)

        await wait_until(lambda: len(transport.calls) == 1)
        await session.aclose()

        assert transport.calls[0]["params"]["offset"] == 40
        assert session.offset == 40

    @pytest.mark.asyncio
    async def test_empty_batch_refetches_without_pause(self):
        transport = FakePollTransport(ok(), ok(7))
        session = start(transport, retry_delay=30.0)

        updates = await take(session, 1)
        await session.aclose()

        assert updates[0].update_id == 7


class TestBackpressure:
    """Tests for the bounded delivery queue."""

    @pytest.mark.asyncio
    async def test_slow_consumer_stalls_worker(self):
        """With a one-slot buffer the second event waits for the consumer."""
        transport = FakePollTransport(ok(1, 2))
        session = start(transport, buffer_size=1)

        await wait_until(lambda: session.queue.full())
        await asyncio.sleep(0.01)
        assert session.offset == 2
        assert len(transport.calls) == 1

        first = await take(session, 1)
        assert first[0].update_id == 1

        await wait_until(lambda: session.offset == 3)
        second = await take(session, 1)
        assert second[0].update_id == 2
        await session.aclose()

    @pytest.mark.asyncio
    async def test_stop_while_blocked_keeps_cursor(self):
        """An event that never reached the queue does not advance the cursor."""
        transport = FakePollTransport(ok(1, 2, 3))
        session = start(transport, buffer_size=1)

        await wait_until(lambda: session.queue.full() and session.offset == 2)
        await asyncio.wait_for(session.aclose(), timeout=1.0)

        assert session.task.done()
        assert session.offset == 2
        remaining = await drain(session)
        assert [u.update_id for u in remaining] == [1]


class TestErrors:
    """Tests for failed fetches."""

    @pytest.mark.asyncio
    async def test_fetch_error_is_reported(self):
        transport = FakePollTransport(NetworkError("connection reset"), ok(4))
        session = start(transport)

        updates = await take(session, 2)
        await session.aclose()

        assert isinstance(updates[0].error, NetworkError)
        assert updates[0].update_id is None
        assert updates[1].update_id == 4
        assert transport.calls[1]["params"]["offset"] == 0

    @pytest.mark.asyncio
    async def test_error_record_dropped_when_queue_full(self):
        """Errors never block the worker; they are dropped on a full queue."""
        transport = FakePollTransport(
            ok(1),
            NetworkError("reset"),
            NetworkError("reset"),
            ServerError(503, "busy"),
        )
        session = start(transport, buffer_size=1)

        await wait_until(lambda: len(transport.calls) == 5)
        assert session.queue.qsize() == 1

        updates = await take(session, 1)
        assert updates[0].update_id == 1
        await session.aclose()

    @pytest.mark.asyncio
    async def test_not_ok_response_is_skipped(self):
        transport = FakePollTransport(UpdatesResponse(ok=False), ok(3))
        session = start(transport)

        updates = await take(session, 1)
        await session.aclose()

        assert updates[0].update_id == 3
        assert updates[0].error is None
        assert session.offset == 4

    @pytest.mark.asyncio
    async def test_stop_interrupts_pause(self):
        transport = FakePollTransport(UpdatesResponse(ok=False))
        session = start(transport, retry_delay=30.0)

        await wait_until(lambda: len(transport.calls) == 1)
        await asyncio.sleep(0.01)
        assert len(transport.calls) == 1

        await asyncio.wait_for(session.aclose(), timeout=1.0)
        assert not session.running

    @pytest.mark.asyncio
    async def test_unexpected_worker_failure_surfaces(self):
        transport = FakePollTransport(RuntimeError("bug"))
        session = start(transport)

        with pytest.raises(RuntimeError, match="bug"):
            await drain(session)


class TestLifecycle:
    """Tests for starting, stopping and iterating sessions."""

    @pytest.mark.asyncio
    async def test_iteration_ends_after_stop(self):
        transport = FakePollTransport(ok(1))
        session = start(transport)

        await take(session, 1)
        session.stop()

        assert await drain(session) == []
        assert not session.running

    @pytest.mark.asyncio
    async def test_external_stop_event(self):
        stop = asyncio.Event()
        stop.set()
        transport = FakePollTransport(ok(1))
        session = LongPoller(transport).start(stop_event=stop)

        assert await drain(session) == []
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_cancelling_task_stops_session(self):
        transport = FakePollTransport()
        session = start(transport)

        await wait_until(lambda: len(transport.calls) == 1)
        session.task.cancel()

        assert await drain(session) == []
        assert session.task.cancelled()

    @pytest.mark.asyncio
    async def test_context_manager(self):
        transport = FakePollTransport()
        async with LongPoller(transport).start() as session:
            assert session.running
        assert not session.running

    @pytest.mark.asyncio
    async def test_start_twice_rejected(self):
        session = start(FakePollTransport())
        with pytest.raises(RuntimeError):
            session.start()
        await session.aclose()

    @pytest.mark.asyncio
    async def test_iterating_unstarted_session_rejected(self):
        session = PollingSession(FakePollTransport(), PollingConfig(), "/api/v1")
        with pytest.raises(RuntimeError):
            async for _ in session:
                pass

    @pytest.mark.asyncio
    async def test_session_config_overrides_poller_default(self):
        transport = FakePollTransport()
        poller = LongPoller(transport, PollingConfig(timeout=25))
        session = poller.start(PollingConfig(timeout=5))

        await wait_until(lambda: len(transport.calls) == 1)
        await session.aclose()

        assert transport.calls[0]["params"]["timeout"] == 5


class TestPollingOverHTTP:
    @pytest.mark.asyncio
    async def test_get_updates_request(self):
        requests: list[httpx.Request] = []

        async def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if len(requests) == 1:
                return httpx.Response(
                    200,
                    json={
                        "ok": True,
                        "result": [
                            {"update_id": 1, "type": "message"},
                            {"update_id": 2, "type": "button", "data": {"id": "b1"}},
                        ],
                    },
                )
            await asyncio.Event().wait()
            return httpx.Response(200, json={"ok": True, "result": []})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        transport = Transport(make_settings(), http_client=client)
        session = LongPoller(transport).start()

        updates = await take(session, 2)
        await wait_until(lambda: len(requests) == 2)
        await session.aclose()
        await client.aclose()

        assert [u.event.type for u in updates] == ["message", "button"]
        assert updates[1].event.data == {"id": "b1"}
        assert requests[0].url.path == "/api/v1/getUpdates"
        assert requests[0].url.params["offset"] == "0"
        assert requests[0].url.params["timeout"] == "25"
        assert requests[1].url.params["offset"] == "3"


class TestWorkerSurvivesHTTPFailures:
    """Failed fetches of any kind become error records, never a dead worker."""

    @pytest.mark.asyncio
    async def test_corrupt_body_keeps_polling(self):
        def corrupt_gzip(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                headers={"Content-Encoding": "gzip"},
                stream=httpx.ByteStream(b"not gzip at all"),
            )

        client = httpx.AsyncClient(transport=httpx.MockTransport(corrupt_gzip))
        transport = Transport(make_settings(), http_client=client)
        session = start(transport)

        updates = await take(session, 2)

        assert all(isinstance(u.error, DecodeError) for u in updates)
        assert session.running
        await session.aclose()
        await client.aclose()

    @pytest.mark.asyncio
    async def test_redirect_loop_keeps_polling(self):
        def redirect_to_self(request: httpx.Request) -> httpx.Response:
            return httpx.Response(302, headers={"Location": str(request.url)})

        client = httpx.AsyncClient(transport=httpx.MockTransport(redirect_to_self), follow_redirects=True)
        transport = Transport(make_settings(), http_client=client)
        session = start(transport)

        updates = await take(session, 2)

        assert all(isinstance(u.error, NetworkError) for u in updates)
        assert session.running
        await session.aclose()
        await client.aclose()
