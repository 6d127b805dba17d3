"""MaxBot: async client for the MaxBot chat-bot platform.

Sends messages, manages chat state and scenarios, and receives events by
long polling or by verified webhook.

Quick Start:
    from maxbot import MaxBotClient, WebhookHandler

    async with MaxBotClient(api_key="...") as bot:
        await bot.send_text("chat_42", "Hello!")

        # Long polling
        async with bot.start_polling() as session:
            async for update in session:
                if update.event is not None:
                    print(update.event.type)

    # Webhooks
    handler = WebhookHandler(secret="...")
    event = handler.handle(raw_body, signature_header, "POST")

Layers:
    - Transport: authenticated JSON requests with classified errors
    - RetryPolicy: bounded fixed-delay retry of retryable errors
    - PollingSession: background long-poll worker with a bounded queue
    - WebhookHandler: HMAC-SHA256 verification and event decoding
"""

__version__ = "0.1.0"

# Client
from .client import MaxBotClient

# Configuration
from .config import PollingConfig, RetryConfig, Settings

# Exceptions
from .exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    DecodeError,
    EncodeError,
    InvalidIdentifierError,
    MalformedPayloadError,
    MaxBotError,
    MethodNotAllowedError,
    MissingSignatureError,
    NetworkError,
    OperationCancelledError,
    RateLimitError,
    RequestConstructionError,
    ServerError,
    SignatureInvalidError,
    StructuralValidationError,
    ValidationError,
    WebhookError,
)

# Logging
from .logging import (
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    get_logger,
    unbind_context,
)

# Models
from .models import (
    Button,
    CarouselItem,
    ChatInfo,
    Message,
    MessageResponse,
    ScenarioResponse,
    TextMessage,
    TransferOptions,
    WebhookEvent,
)

# Transport and delivery
from .polling import LongPoller, PollingSession, PollingUpdate
from .retry import RetryPolicy
from .transport import Transport
from .webhooks import WebhookHandler, compute_signature, create_webhook_router, verify_signature

__all__ = [
    # Version
    "__version__",
    # Client
    "MaxBotClient",
    # Configuration
    "Settings",
    "RetryConfig",
    "PollingConfig",
    # Exceptions
    "MaxBotError",
    "ConfigurationError",
    "RequestConstructionError",
    "EncodeError",
    "DecodeError",
    "NetworkError",
    "OperationCancelledError",
    "APIError",
    "RateLimitError",
    "AuthenticationError",
    "ValidationError",
    "InvalidIdentifierError",
    "ServerError",
    "WebhookError",
    "MethodNotAllowedError",
    "MissingSignatureError",
    "SignatureInvalidError",
    "MalformedPayloadError",
    "StructuralValidationError",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
    "unbind_context",
    # Models
    "Button",
    "CarouselItem",
    "ChatInfo",
    "Message",
    "MessageResponse",
    "ScenarioResponse",
    "TextMessage",
    "TransferOptions",
    "WebhookEvent",
    # Transport and delivery
    "Transport",
    "RetryPolicy",
    "LongPoller",
    "PollingSession",
    "PollingUpdate",
    "WebhookHandler",
    "compute_signature",
    "verify_signature",
    "create_webhook_router",
]
