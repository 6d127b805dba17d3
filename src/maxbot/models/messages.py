"""Outbound message bodies.

Any of these (or a plain dict) can be passed to ``send_message``.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from .base import OutboundModel


class Button(OutboundModel):
    """Keyboard or carousel button. ``type`` is "text", "url", etc."""

    id: str = ""
    title: str
    type: str = "text"
    value: str = ""


class CarouselItem(OutboundModel):
    title: str
    description: str = ""
    image_url: str = ""
    buttons: list[Button] = Field(default_factory=list)


class TextMessage(OutboundModel):
    text: str


class ImageMessage(OutboundModel):
    image_url: str


class ButtonsMessage(OutboundModel):
    text: str
    buttons: list[Button] = Field(default_factory=list)


class KeyboardMessage(OutboundModel):
    """Text with rows of buttons."""

    text: str
    buttons: list[list[Button]] = Field(default_factory=list)


class CarouselMessage(OutboundModel):
    carousel: list[CarouselItem]


class LocationMessage(OutboundModel):
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    title: str | None = None


class ContactMessage(OutboundModel):
    phone_number: str
    first_name: str
    last_name: str | None = None


class TemplateMessage(OutboundModel):
    template_id: str
    variables: dict[str, Any] | None = None


__all__ = [
    "Button",
    "ButtonsMessage",
    "CarouselItem",
    "CarouselMessage",
    "ContactMessage",
    "ImageMessage",
    "KeyboardMessage",
    "LocationMessage",
    "TemplateMessage",
    "TextMessage",
]
