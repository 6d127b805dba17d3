"""MaxBot API client.

Example:
    ```python
    from maxbot.client import MaxBotClient

    async with MaxBotClient(api_key="...") as bot:
        await bot.send_text("chat_42", "Hello!")
    ```
"""

from .base import ClientBase
from .client import MaxBotClient

__all__ = [
    "ClientBase",
    "MaxBotClient",
]
