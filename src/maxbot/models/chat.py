"""Chat, user and message records."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from .base import InboundModel, OutboundModel


class User(InboundModel):
    """Platform user attached to a chat or event."""

    id: str = ""
    first_name: str = ""
    last_name: str = ""
    username: str = ""


class Chat(InboundModel):
    """Chat as embedded in events and scenario sessions."""

    id: str = ""
    type: str = ""
    status: str = ""
    user: User | None = None
    variables: dict[str, str] = Field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ChatInfo(InboundModel):
    """Response of ``GET /chats/{id}``."""

    id: str = ""
    status: str = ""
    user: User | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Message(InboundModel):
    """Chat message. ``payload`` is opaque JSON."""

    id: str = ""
    chat_id: str = ""
    text: str = ""
    direction: str = ""
    type: str = ""
    payload: Any = None
    created_at: datetime | None = None


class MessageResponse(InboundModel):
    """Acknowledgement of ``POST /chats/{id}/messages``."""

    id: str = ""
    timestamp: datetime | None = None
    status: str = ""


class TransferOptions(OutboundModel):
    """Target of a hand-off to a human agent or agent group."""

    agent_id: str | None = None
    group_id: str | None = None
    metadata: dict[str, str] | None = None


__all__ = [
    "Chat",
    "ChatInfo",
    "Message",
    "MessageResponse",
    "TransferOptions",
    "User",
]
