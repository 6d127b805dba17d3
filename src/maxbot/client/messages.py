"""Message operations."""

from __future__ import annotations

import asyncio
from typing import Any

from pydantic import BaseModel

from maxbot.exceptions import ValidationError
from maxbot.logging import get_logger
from maxbot.models import (
    Button,
    CarouselItem,
    CarouselMessage,
    KeyboardMessage,
    Message,
    MessageResponse,
    TextMessage,
)

logger = get_logger(__name__)

DEFAULT_MESSAGE_LIMIT = 50


class MessagesMixin:
    """Mixin providing message operations for MaxBotClient.

    This mixin expects the following attributes/methods from the base class:
    - _call(method, path, body, *, params, response_model, cancel)
    - _path(*segments) -> str
    - _require_id(value, name) -> str
    """

    # These will be provided by the base class
    _call: Any
    _path: Any
    _require_id: Any

    async def get_messages(
        self,
        chat_id: str,
        limit: int = DEFAULT_MESSAGE_LIMIT,
        *,
        cancel: asyncio.Event | None = None,
    ) -> list[Message]:
        """List recent messages of a chat.

        Args:
            chat_id: Chat to read.
            limit: Maximum number of messages.
            cancel: Optional cancellation signal.

        Returns:
            Messages as returned by the platform.
        """
        self._require_id(chat_id, "chat ID")
        if limit < 1:
            raise ValidationError(None, f"limit must be positive, got {limit}")
        return await self._call(
            "GET",
            self._path("chats", chat_id, "messages"),
            params={"limit": limit},
            response_model=list[Message],
            cancel=cancel,
        )

    async def send_message(
        self,
        chat_id: str,
        message: BaseModel | dict[str, Any],
        *,
        cancel: asyncio.Event | None = None,
    ) -> MessageResponse:
        """Send a message to a chat.

        Args:
            chat_id: Target chat.
            message: Any message body model (TextMessage, KeyboardMessage, ...)
                or a plain JSON-serializable dict.
            cancel: Optional cancellation signal.

        Returns:
            Delivery acknowledgement.

        Raises:
            ValidationError: If the message is empty.
        """
        self._require_id(chat_id, "chat ID")
        if message is None or (isinstance(message, dict) and not message):
            raise ValidationError(None, "message cannot be empty")

        result = await self._call(
            "POST",
            self._path("chats", chat_id, "messages"),
            message,
            response_model=MessageResponse,
            cancel=cancel,
        )
        logger.info("Message sent", chat_id=chat_id, message_id=result.id)
        return result

    async def send_text(
        self,
        chat_id: str,
        text: str,
        *,
        cancel: asyncio.Event | None = None,
    ) -> MessageResponse:
        """Send a plain text message."""
        if not text:
            raise ValidationError(None, "message cannot be empty")
        return await self.send_message(chat_id, TextMessage(text=text), cancel=cancel)

    async def send_keyboard(
        self,
        chat_id: str,
        text: str,
        buttons: list[list[Button]],
        *,
        cancel: asyncio.Event | None = None,
    ) -> MessageResponse:
        """Send text with rows of buttons."""
        return await self.send_message(
            chat_id,
            KeyboardMessage(text=text, buttons=buttons),
            cancel=cancel,
        )

    async def send_carousel(
        self,
        chat_id: str,
        items: list[CarouselItem],
        *,
        cancel: asyncio.Event | None = None,
    ) -> MessageResponse:
        """Send a carousel of cards."""
        if not items:
            raise ValidationError(None, "carousel needs at least one item")
        return await self.send_message(chat_id, CarouselMessage(carousel=items), cancel=cancel)
