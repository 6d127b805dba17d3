"""Webhook ingress: authenticate and decode inbound event requests."""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError

from maxbot.config import Settings
from maxbot.exceptions import (
    MalformedPayloadError,
    MethodNotAllowedError,
    MissingSignatureError,
    SignatureInvalidError,
    StructuralValidationError,
)
from maxbot.logging import get_logger
from maxbot.models import WebhookEvent

from .signing import verify_signature

logger = get_logger(__name__)


class WebhookHandler:
    """Verifies and decodes inbound webhook requests.

    Checks run in a fixed order and the first failure wins:
    method, signature presence, signature match, JSON decode, event type.

    Without a secret the handler runs in insecure mode: signatures must
    still be present but are not checked, and every request logs a
    warning. Only use this for local development.

    Example:
        ```python
        handler = WebhookHandler(secret=settings.webhook_secret)
        event = handler.handle(body, request.headers.get("X-Signature"), request.method)
        ```
    """

    def __init__(self, secret: str | None = None) -> None:
        self._secret = secret or None
        if self._secret is None:
            logger.warning("Webhook secret not set, signatures will NOT be verified")

    @classmethod
    def from_settings(cls, settings: Settings) -> WebhookHandler:
        return cls(secret=settings.webhook_secret)

    @property
    def insecure(self) -> bool:
        """True when no secret is configured."""
        return self._secret is None

    def verify(self, body: bytes, signature: str) -> bool:
        """Check ``signature`` against the raw ``body``."""
        if self._secret is None:
            logger.warning("Webhook secret not set, skipping signature verification")
            return True
        return verify_signature(body, signature, self._secret)

    def handle(
        self,
        body: bytes,
        signature: str | None,
        method: str = "POST",
    ) -> WebhookEvent:
        """Authenticate and decode one webhook request.

        Args:
            body: Raw request body, exactly as received.
            signature: Value of the X-Signature header, or None if absent.
            method: HTTP method of the request.

        Returns:
            The verified, decoded event.

        Raises:
            MethodNotAllowedError: Method is not POST.
            MissingSignatureError: No signature header.
            SignatureInvalidError: Signature does not match the body.
            MalformedPayloadError: Body is not a valid event envelope.
            StructuralValidationError: Event has no ``type``.
        """
        if method.upper() != "POST":
            raise MethodNotAllowedError(method)

        if not signature:
            raise MissingSignatureError()

        if not self.verify(body, signature):
            logger.warning("Webhook signature mismatch", body_size=len(body))
            raise SignatureInvalidError()

        try:
            event = WebhookEvent.model_validate_json(body)
        except PydanticValidationError as e:
            raise MalformedPayloadError(f"error decoding event: {e}") from e

        if not event.type:
            raise StructuralValidationError("type", "missing event type")

        logger.info(
            "Webhook event received",
            type=event.type,
            update_id=event.update_id,
            chat_id=event.chat.id if event.chat else None,
        )
        return event
