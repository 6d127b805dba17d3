"""MaxBot exception hierarchy.

Provides structured, classified exceptions for the transport, retry,
polling and webhook layers. All exceptions inherit from MaxBotError so
callers can catch every client error with a single except clause.

Outbound errors carry a ``retryable`` flag that drives the retry policy.
Inbound webhook errors carry the HTTP status the ingress responds with.
"""

from __future__ import annotations


class MaxBotError(Exception):
    """Base exception for all MaxBot errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code.
        retryable: Whether the retry policy may re-run the failed operation.
    """

    code: str = "maxbot_error"
    retryable: bool = False

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        """Convert exception to API-friendly dictionary."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }


class ConfigurationError(MaxBotError):
    """Configuration error.

    Raised when required configuration (such as the API key) is missing.
    """

    code: str = "configuration_error"


class RequestConstructionError(MaxBotError):
    """The outbound request could not be built.

    Caller misuse (malformed URL, unsupported scheme). Never retried.
    """

    code: str = "request_construction_error"


class EncodeError(MaxBotError):
    """The request body could not be serialized to JSON."""

    code: str = "encode_error"


class DecodeError(MaxBotError):
    """A successful response body did not match the expected shape.

    Indicates a protocol mismatch, so it is never retried.
    """

    code: str = "decode_error"


class NetworkError(MaxBotError):
    """Transient network failure (connect, read, timeout)."""

    code: str = "network_error"
    retryable: bool = True


class OperationCancelledError(MaxBotError):
    """Cancellation was signalled before an attempt could run."""

    code: str = "cancelled"

    def __init__(self, message: str = "operation cancelled") -> None:
        super().__init__(message)


class APIError(MaxBotError):
    """Non-2xx response from the remote API.

    Attributes:
        status_code: HTTP status of the response (None when raised client-side).
        api_code: Code from the ``{code, message}`` error document, if decoded.
        body: Raw (truncated) body text when no error document was decoded.
    """

    code: str = "api_error"

    def __init__(
        self,
        status_code: int | None,
        message: str,
        api_code: int | None = None,
        body: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.api_code = api_code
        self.body = body
        self.detail = message
        shown = api_code if api_code is not None else status_code
        super().__init__(message if shown is None else f"API error {shown}: {message}")

    def to_dict(self) -> dict[str, object]:
        """Convert exception to API-friendly dictionary."""
        return {
            "error": {
                "code": self.code,
                "status_code": self.status_code,
                "api_code": self.api_code,
                "message": self.message,
            }
        }


class RateLimitError(APIError):
    """Rate limit exceeded (HTTP 429).

    Retried after the rate-limit delay rather than the ordinary one.

    Attributes:
        retry_after: Seconds suggested by a ``Retry-After`` header, if any.
    """

    code: str = "rate_limit_exceeded"
    retryable: bool = True

    def __init__(
        self,
        status_code: int = 429,
        message: str = "rate limit exceeded",
        api_code: int | None = None,
        body: str | None = None,
        retry_after: float | None = None,
    ) -> None:
        self.retry_after = retry_after
        super().__init__(status_code, message, api_code=api_code, body=body)


class AuthenticationError(APIError):
    """Credentials were rejected (HTTP 401/403). Never retried."""

    code: str = "authentication_error"


class ValidationError(APIError):
    """The request was rejected as invalid (4xx). Never retried."""

    code: str = "validation_error"


class InvalidIdentifierError(ValidationError):
    """A chat or scenario identifier is blank or unknown.

    Raised client-side for blank identifiers and for HTTP 404 responses.
    """

    code: str = "invalid_identifier"

    def __init__(
        self,
        message: str = "invalid identifier",
        status_code: int | None = None,
        api_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(status_code, message, api_code=api_code, body=body)


class ServerError(APIError):
    """Server-side failure (5xx). Retried up to the attempt budget."""

    code: str = "server_error"
    retryable: bool = True


class WebhookError(MaxBotError):
    """Inbound webhook request rejected.

    Attributes:
        status_code: HTTP status the ingress responds with.
    """

    code: str = "webhook_error"
    status_code: int = 400


class MethodNotAllowedError(WebhookError):
    """Webhook request used a method other than POST."""

    code: str = "method_not_allowed"
    status_code: int = 405

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"invalid HTTP method {method}, expected POST")


class MissingSignatureError(WebhookError):
    """Webhook request carried no X-Signature header."""

    code: str = "missing_signature"

    def __init__(self, message: str = "missing X-Signature header") -> None:
        super().__init__(message)


class SignatureInvalidError(WebhookError):
    """Webhook signature did not match the body."""

    code: str = "signature_invalid"

    def __init__(self, message: str = "invalid webhook signature") -> None:
        super().__init__(message)


class MalformedPayloadError(WebhookError):
    """Webhook body could not be decoded into an event envelope."""

    code: str = "malformed_payload"


class StructuralValidationError(WebhookError):
    """Webhook body decoded but is missing a required field."""

    code: str = "structural_invalid"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field}: {message}")

    def to_dict(self) -> dict[str, object]:
        """Convert exception to API-friendly dictionary."""
        return {
            "error": {
                "code": self.code,
                "field": self.field,
                "message": self.message,
            }
        }
