"""FastAPI route for receiving webhook events."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response

from maxbot.exceptions import WebhookError
from maxbot.logging import get_logger
from maxbot.models import WebhookEvent

from .ingress import WebhookHandler
from .signing import SIGNATURE_HEADER

logger = get_logger(__name__)

EventCallback = Callable[[WebhookEvent], Awaitable[None] | None]

# Registered for every method so non-POST requests get the ingress error text
_ROUTE_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def create_webhook_router(
    handler: WebhookHandler,
    on_event: EventCallback,
    path: str = "/webhook",
) -> APIRouter:
    """Create a router that verifies webhooks and forwards events.

    ``on_event`` is called exactly once per accepted request, with the
    decoded event; it may be a plain function or a coroutine function.
    Rejected requests get a plain-text response with the error message and
    the error's status (405 for a wrong method, 400 otherwise).

    Args:
        handler: Configured WebhookHandler.
        on_event: Downstream handler for verified events.
        path: Route path.

    Returns:
        Router to include in a FastAPI application.

    Example:
        ```python
        app = FastAPI()
        app.include_router(create_webhook_router(WebhookHandler(secret), dispatch))
        ```
    """
    router = APIRouter()

    @router.api_route(path, methods=_ROUTE_METHODS)
    async def receive_webhook(request: Request) -> Response:
        body = await request.body()
        try:
            event = handler.handle(body, request.headers.get(SIGNATURE_HEADER), request.method)
        except WebhookError as e:
            logger.warning("Webhook rejected", code=e.code, error=e.message, path=request.url.path)
            return PlainTextResponse(e.message, status_code=e.status_code)

        result = on_event(event)
        if inspect.isawaitable(result):
            await result
        return Response(status_code=200)

    return router
