"""HMAC-SHA256 signatures for inbound webhook requests.

The platform signs the raw request body with the shared secret and sends
the lowercase hex digest in the ``X-Signature`` header. Verification runs
over the raw bytes, before any JSON parsing, so re-ordered keys or
re-formatted whitespace can never validate a body that was not signed.
"""

from __future__ import annotations

import hashlib
import hmac

SIGNATURE_HEADER = "X-Signature"


def compute_signature(body: bytes, secret: str) -> str:
    """Compute the HMAC-SHA256 signature of a webhook body.

    Args:
        body: Raw request body.
        secret: Shared secret for HMAC.

    Returns:
        Lowercase hex digest.
    """
    return hmac.new(
        key=secret.encode("utf-8"),
        msg=body,
        digestmod=hashlib.sha256,
    ).hexdigest()


def verify_signature(body: bytes, signature: str, secret: str) -> bool:
    """Verify an HMAC-SHA256 signature in constant time.

    Args:
        body: Raw request body that was signed.
        signature: Hex digest received in the request header.
        secret: Shared secret for HMAC.

    Returns:
        True if the signature matches the body, False otherwise.
    """
    expected = compute_signature(body, secret)
    return hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8"))
