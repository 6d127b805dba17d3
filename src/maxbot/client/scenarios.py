"""Scenario operations: start and stop scripted dialogues in a chat."""

from __future__ import annotations

import asyncio
from typing import Any

from maxbot.models import ScenarioResponse


class ScenariosMixin:
    """Mixin providing scenario operations for MaxBotClient.

    This mixin expects the following attributes/methods from the base class:
    - _call(method, path, body, *, params, response_model, cancel)
    - _path(*segments) -> str
    - _require_id(value, name) -> str
    """

    # These will be provided by the base class
    _call: Any
    _path: Any
    _require_id: Any

    async def start_scenario(
        self,
        chat_id: str,
        scenario_id: str,
        params: dict[str, Any] | None = None,
        *,
        cancel: asyncio.Event | None = None,
    ) -> ScenarioResponse:
        """Start a scenario in a chat.

        Args:
            chat_id: Chat to run the scenario in.
            scenario_id: Scenario to start.
            params: Initial scenario variables, sent as the JSON body.
            cancel: Optional cancellation signal.

        Returns:
            The started session.
        """
        self._require_id(chat_id, "chat ID")
        self._require_id(scenario_id, "scenario ID")
        return await self._call(
            "POST",
            self._path("chats", chat_id, "scenarios", scenario_id, "start"),
            params or {},
            response_model=ScenarioResponse,
            cancel=cancel,
        )

    async def stop_scenario(
        self,
        chat_id: str,
        scenario_id: str,
        *,
        cancel: asyncio.Event | None = None,
    ) -> None:
        """Stop a running scenario."""
        self._require_id(chat_id, "chat ID")
        self._require_id(scenario_id, "scenario ID")
        await self._call(
            "POST",
            self._path("chats", chat_id, "scenarios", scenario_id, "stop"),
            cancel=cancel,
        )
