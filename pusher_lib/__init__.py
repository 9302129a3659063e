"""
Client library for the Pusher Channels HTTP API.

Publishes events, queries channel state, signs client subscription tokens
and authenticates webhooks.

Basic Usage:
    from pusher_lib import PusherConfig, trigger, authenticate

    config = PusherConfig(app_id="123", key="app-key", secret="app-secret", cluster="eu")

    # Publish an event
    result = trigger(config, ["my-channel"], "my-event", {"message": "hello"})
    if not result.ok:
        print(result.error)

    # Sign a private channel subscription
    token = authenticate(config, "private-my-channel", "1234.5678")

Webhook Usage:
    from pusher_lib import validate_webhook

    body = validate_webhook(
        config,
        key=headers["X-Pusher-Key"],
        signature=headers["X-Pusher-Signature"],
        body=raw_body,
    )
    if body is None:
        ...  # reject
"""

from pusher_lib.config import PusherConfig

from pusher_lib.errors import (
    ChannelNameTooLong,
    DecodeError,
    EventNameTooLong,
    Failure,
    InvalidChannelName,
    InvalidPayload,
    PayloadTooLarge,
    PusherError,
    PusherResponse,
    Success,
    TooManyChannels,
    TransportError,
    ValidationError,
    ValidationReason,
)

from pusher_lib.pusher import (
    authenticate,
    authenticate_user,
    channel_info,
    channels_info,
    trigger,
    users_info,
    validate_webhook,
)

from pusher_lib.request import RequestsTransport, Transport

from pusher_lib.signature import sign, verify

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Configuration
    "PusherConfig",
    # Operations
    "authenticate",
    "authenticate_user",
    "channel_info",
    "channels_info",
    "trigger",
    "users_info",
    "validate_webhook",
    # Signing
    "sign",
    "verify",
    # Transport
    "RequestsTransport",
    "Transport",
    # Errors and results
    "ChannelNameTooLong",
    "DecodeError",
    "EventNameTooLong",
    "Failure",
    "InvalidChannelName",
    "InvalidPayload",
    "PayloadTooLarge",
    "PusherError",
    "PusherResponse",
    "Success",
    "TooManyChannels",
    "TransportError",
    "ValidationError",
    "ValidationReason",
]
