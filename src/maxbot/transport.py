"""Authenticated HTTP transport for the MaxBot API.

Every outbound call funnels through Transport.execute(), which:
- serializes the optional JSON body
- attaches the bearer credential and content headers
- classifies non-2xx responses into structured MaxBotError subclasses
- decodes successful bodies into the caller's response model

Transport never retries and never sleeps; RetryPolicy decides that.

Example:
    ```python
    transport = Transport(Settings(api_key="..."))
    chat = await transport.execute("GET", "/api/v1/chats/42", response_model=ChatInfo)
    await transport.aclose()
    ```
"""

from __future__ import annotations

import json
from datetime import datetime
from functools import lru_cache
from typing import Any

import httpx
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from maxbot.config import Settings
from maxbot.exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    DecodeError,
    EncodeError,
    InvalidIdentifierError,
    NetworkError,
    RateLimitError,
    RequestConstructionError,
    ServerError,
    ValidationError,
)
from maxbot.logging import get_logger

logger = get_logger(__name__)

# Error bodies are read through this cap
MAX_ERROR_BODY_BYTES = 1 << 20
# Raw body text longer than this is cut from the error message (kept on .body)
ERROR_MESSAGE_LIMIT = 1000


def classify_status(status_code: int) -> type[APIError]:
    """Map a non-2xx HTTP status to its error class."""
    if status_code == 429:
        return RateLimitError
    if status_code in (401, 403):
        return AuthenticationError
    if status_code == 404:
        return InvalidIdentifierError
    if status_code >= 500:
        return ServerError
    if status_code >= 400:
        return ValidationError
    return APIError


def parse_error_document(raw: bytes) -> tuple[int | None, str | None]:
    """Decode a ``{code, message}`` error document.

    Returns:
        (code, message), or (None, None) when the body is not an error
        document with a non-empty message.
    """
    try:
        doc = json.loads(raw)
    except ValueError:
        return None, None
    if not isinstance(doc, dict):
        return None, None

    message = doc.get("message")
    if not isinstance(message, str) or not message:
        return None, None

    code = doc.get("code")
    return (code if isinstance(code, int) else None), message


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True)
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode_body(body: Any) -> bytes:
    """Serialize a request body to JSON bytes.

    Raises:
        EncodeError: If the body is not JSON-serializable.
    """
    try:
        if isinstance(body, BaseModel):
            return body.model_dump_json(exclude_none=True).encode("utf-8")
        return json.dumps(body, default=_json_default).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EncodeError(f"encode request body failed: {e}") from e


@lru_cache(maxsize=128)
def _adapter(response_model: Any) -> TypeAdapter[Any]:
    return TypeAdapter(response_model)


def decode_body(content: bytes, response_model: Any) -> Any:
    """Validate a JSON body into ``response_model``.

    Raises:
        DecodeError: If the body does not match the expected shape.
    """
    try:
        return _adapter(response_model).validate_json(content)
    except PydanticValidationError as e:
        raise DecodeError(f"decode response failed: {e}") from e


def _retry_after(response: httpx.Response) -> float | None:
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


class Transport:
    """Single round-trip executor over a shared httpx.AsyncClient.

    Configuration (base address, credential, headers) is fixed at
    construction, so one Transport can serve a long-poll session and
    ordinary calls concurrently.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            settings: Client settings; ``api_key`` must be set.
            http_client: Optional preconfigured client. When omitted the
                transport creates (and later closes) its own.

        Raises:
            ConfigurationError: If no API key is configured.
        """
        if not settings.api_key:
            raise ConfigurationError(
                "API key is required. Pass api_key or set the MAXBOT_API_KEY "
                "environment variable."
            )

        self._settings = settings
        self._headers = {
            "Authorization": f"Bearer {settings.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": settings.user_agent,
        }
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.request_timeout),
            follow_redirects=True,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    async def execute(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        params: dict[str, Any] | None = None,
        response_model: Any = None,
        timeout: float | None = None,
    ) -> Any:
        """Perform one authenticated request.

        Args:
            method: HTTP method.
            path: Path relative to the base URL (e.g. ``/api/v1/chats/42``).
            body: JSON body; None sends no body.
            params: Query parameters.
            response_model: Type to decode a successful body into. None
                discards the body.
            timeout: Per-request timeout overriding the client default.

        Returns:
            The decoded body, or None without a response_model.

        Raises:
            RequestConstructionError: The request could not be built.
            EncodeError: The body could not be serialized.
            NetworkError: The round-trip failed in transit.
            APIError: The server answered with status >= 400 (subclassed
                by classification).
            DecodeError: A successful body did not match response_model, or
                a body could not be decompressed.
        """
        content = encode_body(body) if body is not None else None
        request = self._build_request(method, path, content, params, timeout)

        logger.debug(
            "Sending request",
            method=request.method,
            path=path,
            has_body=content is not None,
        )

        try:
            response = await self._client.send(request, stream=True)
        except httpx.UnsupportedProtocol as e:
            raise RequestConstructionError(f"create request failed: {e}") from e
        except httpx.RequestError as e:
            # Connect and read failures, timeouts, redirect loops
            logger.debug("Request failed in transit", method=method, path=path, error=str(e))
            raise NetworkError(f"request failed: {e}") from e

        try:
            if response.status_code >= 400:
                raise await self._read_error(response)
            raw = await response.aread()
        except httpx.DecodingError as e:
            raise DecodeError(f"decoding response body failed: {e}") from e
        except httpx.RequestError as e:
            raise NetworkError(f"reading response failed: {e}") from e
        finally:
            await response.aclose()

        logger.debug(
            "Received response",
            method=request.method,
            path=path,
            status_code=response.status_code,
        )

        if response_model is None:
            return None
        return decode_body(raw, response_model)

    def _build_request(
        self,
        method: str,
        path: str,
        content: bytes | None,
        params: dict[str, Any] | None,
        timeout: float | None,
    ) -> httpx.Request:
        extra: dict[str, Any] = {}
        if timeout is not None:
            extra["timeout"] = timeout
        try:
            return self._client.build_request(
                method,
                self._settings.base_url + path,
                params=params,
                content=content,
                headers=self._headers,
                **extra,
            )
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise RequestConstructionError(f"create request failed: {e}") from e

    async def _read_error(self, response: httpx.Response) -> APIError:
        """Read a bounded error body and classify it."""
        raw = bytearray()
        async for chunk in response.aiter_bytes():
            raw.extend(chunk[: MAX_ERROR_BODY_BYTES - len(raw)])
            if len(raw) >= MAX_ERROR_BODY_BYTES:
                break

        status = response.status_code
        error_cls = classify_status(status)
        api_code, message = parse_error_document(bytes(raw))

        kwargs: dict[str, Any] = {"status_code": status, "api_code": api_code}
        if error_cls is RateLimitError:
            kwargs["retry_after"] = _retry_after(response)

        if message is not None:
            error = error_cls(message=message, **kwargs)
        else:
            text = raw.decode(response.encoding or "utf-8", errors="replace")
            error = error_cls(
                message=text[:ERROR_MESSAGE_LIMIT] or response.reason_phrase,
                body=text,
                **kwargs,
            )

        logger.debug(
            "API error response",
            status_code=status,
            api_code=api_code,
            error_code=error.code,
        )
        return error

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Transport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
