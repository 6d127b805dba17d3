"""MaxBot API client.

This module provides the main MaxBotClient class that combines
all API operations through mixins.

Example:
    ```python
    from maxbot import MaxBotClient

    async with MaxBotClient(api_key="...") as bot:
        chat = await bot.get_chat("chat_42")
        await bot.send_text(chat.id, "Hello!")

        async with bot.start_polling() as session:
            async for update in session:
                ...
    ```
"""

from __future__ import annotations

from .base import ClientBase
from .chats import ChatsMixin
from .messages import MessagesMixin
from .scenarios import ScenariosMixin
from .updates import UpdatesMixin


class MaxBotClient(ChatsMixin, MessagesMixin, ScenariosMixin, UpdatesMixin, ClientBase):
    """Async client for the MaxBot platform.

    Every per-resource call runs through the retry policy; long polling
    runs as a separate background session.
    """

    async def __aenter__(self) -> MaxBotClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
