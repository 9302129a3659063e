"""
HMAC-SHA256 signing and verification.

Covers the three places the API relies on a shared secret: REST request
authentication, client subscription tokens and webhook bodies.
"""

import hashlib
import hmac
import time
from typing import Dict, Optional

from pusher_lib.config import PusherConfig

AUTH_VERSION = "1.0"


def sign(secret: str, message: str, encoding: str = "utf-8") -> str:
    """
    Compute an HMAC-SHA256 signature.

    Args:
        secret: The shared secret
        message: The string to sign
        encoding: Text encoding (default: utf-8)

    Returns:
        Lowercase hex digest
    """
    h = hmac.new(
        secret.encode(encoding),
        message.encode(encoding),
        hashlib.sha256,
    )
    return h.hexdigest()


def verify(secret: str, message: str, signature: str) -> bool:
    """
    Check a supplied signature against the expected one.

    Args:
        secret: The shared secret
        message: The signed string
        signature: Hex signature supplied by the sender

    Returns:
        True if the signature matches
    """
    expected = sign(secret, message)

    # Mismatch position must not affect timing
    return hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8"))


def md5_hex(body: str) -> str:
    return hashlib.md5(body.encode("utf-8")).hexdigest()


def canonical_query(params: Dict[str, str]) -> str:
    """Lowercased keys in sorted order, joined without URL escaping."""
    pairs = sorted((key.lower(), str(value)) for key, value in params.items())
    return "&".join(f"{key}={value}" for key, value in pairs)


def sign_request(
    config: PusherConfig,
    method: str,
    path: str,
    params: Optional[Dict[str, str]] = None,
    body: Optional[str] = None,
    timestamp: Optional[int] = None,
) -> Dict[str, str]:
    """
    Add authentication parameters to a REST request.

    String to sign:
    <METHOD>\\n<path>\\n<canonical query>

    Args:
        config: Application configuration
        method: HTTP method
        path: Full request path, including /apps/<app_id>
        params: Query parameters of the request
        body: Request body, if any
        timestamp: Unix seconds (default: now)

    Returns:
        New query parameter dictionary including auth_signature
    """
    # Copy so the caller's params stay untouched
    signed_params = dict(params or {})
    signed_params["auth_key"] = config.key
    signed_params["auth_timestamp"] = str(int(time.time()) if timestamp is None else timestamp)
    signed_params["auth_version"] = AUTH_VERSION

    # Body hash only for requests that carry one
    if body:
        signed_params["body_md5"] = md5_hex(body)

    # auth_signature itself is not part of the signed query
    string_to_sign = "\n".join([method.upper(), path, canonical_query(signed_params)])
    signed_params["auth_signature"] = sign(config.secret, string_to_sign)

    return signed_params
