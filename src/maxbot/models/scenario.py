"""Scenario (scripted dialogue) records.

The client never interprets step payloads; they are carried as opaque JSON.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from .base import InboundModel
from .chat import Chat


class NextStep(InboundModel):
    """Transition to ``step_id`` when ``condition`` holds."""

    condition: str = ""
    step_id: str = ""


class Step(InboundModel):
    """A single scenario step ("message", "input", "condition", ...)."""

    id: str = ""
    type: str = ""
    payload: Any = None
    next_steps: list[NextStep] = Field(default_factory=list)
    timeout: int = 0
    error_step: str = ""


class Variable(InboundModel):
    name: str = ""
    type: str = ""
    description: str = ""
    required: bool = False
    default: str = ""


class ScenarioSettings(InboundModel):
    timeout: int = 0
    allow_interruption: bool = False
    restartable: bool = False


class Scenario(InboundModel):
    id: str = ""
    name: str = ""
    description: str = ""
    version: str = ""
    steps: dict[str, Step] = Field(default_factory=dict)
    variables: dict[str, Variable] = Field(default_factory=dict)
    settings: ScenarioSettings = Field(default_factory=ScenarioSettings)
    metadata: Any = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StepExecution(InboundModel):
    step_id: str = ""
    started_at: datetime | None = None
    completed_at: datetime | None = None
    payload: Any = None


class ScenarioSession(InboundModel):
    """Running scenario bound to a chat."""

    id: str = ""
    scenario: Scenario = Field(default_factory=Scenario)
    chat: Chat = Field(default_factory=Chat)
    state: dict[str, str] = Field(default_factory=dict)
    current_step: StepExecution = Field(default_factory=StepExecution)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ScenarioResponse(InboundModel):
    """Response of ``POST .../scenarios/{id}/start``."""

    session_id: str = ""
    status: str = ""
    started_at: datetime | None = None


__all__ = [
    "NextStep",
    "Scenario",
    "ScenarioResponse",
    "ScenarioSession",
    "ScenarioSettings",
    "Step",
    "StepExecution",
    "Variable",
]
