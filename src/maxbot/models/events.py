"""Inbound event envelope and the long-poll response wrapper."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from .base import InboundModel
from .chat import Chat, Message, User


class WebhookEvent(InboundModel):
    """Event delivered by long polling or by webhook.

    Attributes:
        update_id: Monotonically increasing id, unique per bot account.
        event_id: Platform-wide event identifier.
        type: Discriminant ("message", "button", ...).
        chat: Chat the event belongs to.
        message: Embedded message for message events.
        user: User who triggered the event.
        data: Opaque event payload, forwarded untouched.
        created_at: When the platform produced the event.
    """

    update_id: int = 0
    event_id: str = ""
    type: str = ""
    chat: Chat | None = None
    message: Message | None = None
    user: User | None = None
    data: Any = None
    created_at: datetime | None = None

    @field_validator("event_id", "type", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        """A JSON null reads as an empty string."""
        return "" if value is None else value


class UpdatesResponse(InboundModel):
    """Body of ``GET /getUpdates``: ``{ok, result: [event, ...]}``."""

    ok: bool = False
    result: list[WebhookEvent] = Field(default_factory=list)


__all__ = ["UpdatesResponse", "WebhookEvent"]
