"""Record shapes exchanged with the bot platform."""

from .base import InboundModel, OutboundModel
from .chat import Chat, ChatInfo, Message, MessageResponse, TransferOptions, User
from .events import UpdatesResponse, WebhookEvent
from .messages import (
    Button,
    ButtonsMessage,
    CarouselItem,
    CarouselMessage,
    ContactMessage,
    ImageMessage,
    KeyboardMessage,
    LocationMessage,
    TemplateMessage,
    TextMessage,
)
from .scenario import (
    NextStep,
    Scenario,
    ScenarioResponse,
    ScenarioSession,
    ScenarioSettings,
    Step,
    StepExecution,
    Variable,
)

__all__ = [
    # Base
    "InboundModel",
    "OutboundModel",
    # Chats
    "Chat",
    "ChatInfo",
    "Message",
    "MessageResponse",
    "TransferOptions",
    "User",
    # Events
    "UpdatesResponse",
    "WebhookEvent",
    # Message bodies
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
    # Scenarios
    "NextStep",
    "Scenario",
    "ScenarioResponse",
    "ScenarioSession",
    "ScenarioSettings",
    "Step",
    "StepExecution",
    "Variable",
]
