"""
Structural validation of channel names, event names and payloads.

Every validator is pure: it returns None when the input is acceptable and
a ValidationError describing the first problem otherwise.
"""

import re
from typing import Callable, Iterable, Optional, Sequence, Union

from pusher_lib.errors import (
    ChannelNameTooLong,
    EventNameTooLong,
    InvalidChannelName,
    PayloadTooLarge,
    TooManyChannels,
    ValidationError,
)

MAX_CHANNEL_NAME_LENGTH = 200
MAX_EVENT_NAME_LENGTH = 200
MAX_DATA_BYTES = 10240
MAX_CHANNELS = 100

CHANNEL_NAME_PATTERN = re.compile(r"\A[-a-zA-Z0-9_=@,.;]+\Z")

Validator = Callable[[], Optional[ValidationError]]


def validate_channel(name: str) -> Optional[ValidationError]:
    """
    Check a channel name against the allowed length and character set.

    Allowed characters are ASCII letters, digits and ``_ - = @ , . ;``.

    Args:
        name: Channel name

    Returns:
        None if valid, otherwise InvalidChannelName (or its ChannelNameTooLong subtype)
    """
    if len(name) > MAX_CHANNEL_NAME_LENGTH:
        return ChannelNameTooLong(
            f"Channel name exceeds {MAX_CHANNEL_NAME_LENGTH} characters: {len(name)}"
        )

    if not CHANNEL_NAME_PATTERN.match(name):
        return InvalidChannelName(f"Invalid channel name: {name!r}")

    return None


def validate_event_name(name: str) -> Optional[ValidationError]:
    if len(name) > MAX_EVENT_NAME_LENGTH:
        return EventNameTooLong(
            f"Event name exceeds {MAX_EVENT_NAME_LENGTH} characters: {len(name)}"
        )
    return None


def validate_data_length(data: Union[str, bytes]) -> Optional[ValidationError]:
    """
    Check the serialized payload size.

    Args:
        data: Serialized payload; strings are measured as UTF-8 bytes

    Returns:
        None if the payload fits, otherwise PayloadTooLarge
    """
    # Measure encoded bytes, not characters
    size = len(data.encode("utf-8") if isinstance(data, str) else data)
    if size > MAX_DATA_BYTES:
        return PayloadTooLarge(f"Payload is {size} bytes (max: {MAX_DATA_BYTES})")
    return None


def validate_channel_count(channels: Sequence[str]) -> Optional[ValidationError]:
    count = len(channels)
    # An event must target at least one channel
    if count == 0 or count > MAX_CHANNELS:
        return TooManyChannels(
            f"An event must target between 1 and {MAX_CHANNELS} channels, got {count}"
        )
    return None


def run_validators(validators: Iterable[Validator]) -> Optional[ValidationError]:
    """Run validators in order and return the first failure, if any."""
    for validator in validators:
        error = validator()
        if error is not None:
            return error
    return None
