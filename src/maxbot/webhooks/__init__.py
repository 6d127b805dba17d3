"""Webhook ingress for MaxBot.

Verifies the HMAC-SHA256 ``X-Signature`` of inbound requests over the raw
body, decodes the event envelope, and hands it to exactly one downstream
handler.

Example:
    ```python
    from maxbot.webhooks import WebhookHandler, create_webhook_router

    handler = WebhookHandler(secret="s3cr3t")

    # Framework-agnostic
    event = handler.handle(raw_body, signature_header, "POST")

    # FastAPI
    app.include_router(create_webhook_router(handler, on_event=process))
    ```
"""

from .ingress import WebhookHandler
from .router import EventCallback, create_webhook_router
from .signing import SIGNATURE_HEADER, compute_signature, verify_signature

__all__ = [
    "SIGNATURE_HEADER",
    "EventCallback",
    "WebhookHandler",
    "compute_signature",
    "create_webhook_router",
    "verify_signature",
]
