"""
Public operations of the Pusher Channels HTTP API.

Every operation takes the configuration explicitly. Request operations
return a PusherResponse; token generation returns a JSON string; webhook
validation returns the parsed body or None.
"""

import json
import logging
import time
from functools import partial
from typing import Any, Dict, Optional, Sequence

from pusher_lib.config import PusherConfig
from pusher_lib.errors import Failure, InvalidPayload, PusherResponse
from pusher_lib.request import Request, Transport, make_request, validate_and_make_request
from pusher_lib.signature import sign, verify
from pusher_lib.validation import (
    validate_channel,
    validate_channel_count,
    validate_data_length,
    validate_event_name,
)

logger = logging.getLogger(__name__)

WEBHOOK_MAX_AGE_SECONDS = 300


def encode_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


def _info_params(attributes: Optional[Sequence[str]]) -> Dict[str, str]:
    if attributes:
        return {"info": ",".join(attributes)}
    return {}


def trigger(
    config: PusherConfig,
    channels: Sequence[str],
    event_name: str,
    data: Any,
    socket_id: Optional[str] = None,
    transport: Optional[Transport] = None,
) -> PusherResponse:
    """
    Trigger an event on one or more channels.

    Args:
        config: Application configuration
        channels: Channels to publish to (1 to 100)
        event_name: Name of the event
        data: Event payload; anything other than a string is JSON-encoded
        socket_id: Connection to exclude from delivery
        transport: HTTP transport (default: RequestsTransport)

    Returns:
        PusherResponse
    """
    channels = list(channels)

    # Serialize non-string payloads up front; the size limit applies to the encoded text
    if isinstance(data, str):
        payload = data
    else:
        try:
            payload = encode_json(data)
        except (TypeError, ValueError, RecursionError) as e:
            logger.debug("Rejected POST /events: payload is not JSON-serializable")
            return Failure(InvalidPayload(f"Payload is not JSON-serializable: {e}"))

    body: Dict[str, Any] = {"name": event_name, "channels": channels, "data": payload}
    if socket_id is not None:
        body["socket_id"] = socket_id

    # Order matters: the first failing check is the one reported
    validators = [
        partial(validate_event_name, event_name),
        partial(validate_data_length, payload),
        partial(validate_channel_count, channels),
    ]
    validators.extend(partial(validate_channel, channel) for channel in channels)

    request = Request(config, "POST", "/events", body=encode_json(body))
    return validate_and_make_request(request, validators, transport)


def channels_info(
    config: PusherConfig,
    prefix_filter: Optional[str] = None,
    attributes: Optional[Sequence[str]] = None,
    transport: Optional[Transport] = None,
) -> PusherResponse:
    """
    List occupied channels.

    Args:
        config: Application configuration
        prefix_filter: Only return channels starting with this prefix
        attributes: Attributes to return for each channel (e.g. user_count)
        transport: HTTP transport (default: RequestsTransport)

    Returns:
        PusherResponse
    """
    params = _info_params(attributes)
    if prefix_filter is not None:
        params["filter_by_prefix"] = prefix_filter

    return make_request(Request(config, "GET", "/channels", params), transport)


def channel_info(
    config: PusherConfig,
    channel: str,
    attributes: Optional[Sequence[str]] = None,
    transport: Optional[Transport] = None,
) -> PusherResponse:
    request = Request(config, "GET", f"/channels/{channel}", _info_params(attributes))
    return validate_and_make_request(request, [partial(validate_channel, channel)], transport)


def users_info(
    config: PusherConfig,
    channel: str,
    transport: Optional[Transport] = None,
) -> PusherResponse:
    """Fetch the ids of users subscribed to a presence channel."""
    request = Request(config, "GET", f"/channels/{channel}/users")
    return validate_and_make_request(request, [partial(validate_channel, channel)], transport)


def authenticate(
    config: PusherConfig,
    channel: str,
    socket_id: str,
    custom_data: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Generate a subscription token for a private or presence channel.

    The custom data is encoded once; the same text is signed and returned
    as channel_data so the receiving end can verify it.

    Args:
        config: Application configuration
        channel: Channel being subscribed to
        socket_id: Connection requesting access
        custom_data: Presence member information

    Returns:
        JSON string with "auth" and, when custom data is given, "channel_data"
    """
    string_to_sign = f"{socket_id}:{channel}"
    channel_data = None

    if custom_data is not None:
        channel_data = encode_json(custom_data)
        string_to_sign += f":{channel_data}"

    signature = sign(config.secret, string_to_sign)
    result = {"auth": f"{config.key}:{signature}"}

    if channel_data is not None:
        result["channel_data"] = channel_data

    return encode_json(result)


def authenticate_user(config: PusherConfig, socket_id: str, user_data: Dict[str, Any]) -> str:
    """
    Generate a user sign-in token.

    Args:
        config: Application configuration
        socket_id: Connection signing in
        user_data: User information; must contain a non-empty "id"

    Returns:
        JSON string with "auth" and "user_data"

    Raises:
        ValueError: If user_data has no id
    """
    if not user_data.get("id"):
        raise ValueError("user_data must contain a non-empty 'id'")

    encoded_user_data = encode_json(user_data)
    signature = sign(config.secret, f"{socket_id}::user::{encoded_user_data}")

    return encode_json({"auth": f"{config.key}:{signature}", "user_data": encoded_user_data})


def validate_webhook(
    config: PusherConfig,
    key: str,
    signature: str,
    body: str,
    max_age_seconds: int = WEBHOOK_MAX_AGE_SECONDS,
) -> Optional[Dict[str, Any]]:
    """
    Authenticate a webhook delivery.

    All failure modes return None so that the sender learns nothing about
    why a delivery was rejected.

    Args:
        config: Application configuration
        key: Value of the X-Pusher-Key header
        signature: Value of the X-Pusher-Signature header
        body: Raw request body
        max_age_seconds: Reject payloads whose time_ms is older than this

    Returns:
        The parsed body, or None if the webhook is not valid
    """
    if not isinstance(key, str) or key != config.key:
        logger.debug("Webhook rejected: unknown key")
        return None

    if not isinstance(signature, str) or not isinstance(body, str):
        logger.debug("Webhook rejected: malformed signature or body")
        return None

    if not verify(config.secret, body, signature):
        logger.debug("Webhook rejected: signature mismatch")
        return None

    # Deeply nested bodies exhaust the parser's recursion limit
    try:
        body_data = json.loads(body)
    except (ValueError, RecursionError):
        logger.debug("Webhook rejected: body is not JSON")
        return None

    if not isinstance(body_data, dict):
        logger.debug("Webhook rejected: body is not a JSON object")
        return None

    time_ms = body_data.get("time_ms")
    if not isinstance(time_ms, int) or isinstance(time_ms, bool):
        logger.debug("Webhook rejected: missing or non-integer time_ms")
        return None

    age_ms = int(time.time() * 1000) - time_ms
    if age_ms > max_age_seconds * 1000:
        logger.debug("Webhook rejected: payload is %d ms old", age_ms)
        return None

    return body_data
