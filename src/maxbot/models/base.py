"""Base models and shared types for MaxBot records."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class InboundModel(BaseModel):
    """Record received from the platform.

    Unknown fields are ignored so newer server payloads still decode.
    Instances are frozen: the client forwards them, it never mutates them.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)


class OutboundModel(BaseModel):
    """Record the client sends to the platform."""

    model_config = ConfigDict(extra="forbid")
