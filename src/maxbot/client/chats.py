"""Chat operations: read chat state, set variables, hand off to an agent."""

from __future__ import annotations

import asyncio
from typing import Any

from maxbot.models import ChatInfo, TransferOptions


class ChatsMixin:
    """Mixin providing chat operations for MaxBotClient.

    This mixin expects the following attributes/methods from the base class:
    - _call(method, path, body, *, params, response_model, cancel)
    - _path(*segments) -> str
    - _require_id(value, name) -> str
    """

    # These will be provided by the base class
    _call: Any
    _path: Any
    _require_id: Any

    async def get_chat(self, chat_id: str, *, cancel: asyncio.Event | None = None) -> ChatInfo:
        """Fetch a chat.

        Args:
            chat_id: Chat to fetch.
            cancel: Optional cancellation signal.

        Returns:
            The chat record.
        """
        self._require_id(chat_id, "chat ID")
        return await self._call(
            "GET",
            self._path("chats", chat_id),
            response_model=ChatInfo,
            cancel=cancel,
        )

    async def set_chat_variables(
        self,
        chat_id: str,
        variables: dict[str, Any],
        *,
        cancel: asyncio.Event | None = None,
    ) -> None:
        """Replace chat variables (``PUT /chats/{id}/variables``)."""
        self._require_id(chat_id, "chat ID")
        await self._call(
            "PUT",
            self._path("chats", chat_id, "variables"),
            variables,
            cancel=cancel,
        )

    async def transfer_to_agent(
        self,
        chat_id: str,
        options: TransferOptions | None = None,
        *,
        cancel: asyncio.Event | None = None,
    ) -> None:
        """Hand the chat off to a human agent or agent group.

        Args:
            chat_id: Chat to transfer.
            options: Target agent/group and metadata. An empty options
                object lets the platform pick.
            cancel: Optional cancellation signal.
        """
        self._require_id(chat_id, "chat ID")
        await self._call(
            "POST",
            self._path("chats", chat_id, "transfer"),
            options or TransferOptions(),
            cancel=cancel,
        )
