"""
Error taxonomy and result types.

Request operations never raise for validation or transport problems;
they return a ``Success`` or a ``Failure`` carrying one of these errors.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union


class ValidationReason(Enum):
    """Reasons an input can be rejected before any network call."""

    INVALID_CHANNEL_NAME = "invalid_channel_name"
    CHANNEL_NAME_TOO_LONG = "channel_name_too_long"
    EVENT_NAME_TOO_LONG = "event_name_too_long"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    TOO_MANY_CHANNELS = "too_many_channels"
    INVALID_PAYLOAD = "invalid_payload"


class PusherError(Exception):
    """Base class for all errors reported by this library."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PusherError):
    """
    An input broke one of the API's structural limits.

    Subclasses carry a fixed reason; the base class takes it explicitly
    and has no reason when none is given.
    """

    reason: Optional[ValidationReason] = None

    def __init__(self, message: str, reason: Optional[ValidationReason] = None):
        super().__init__(message)
        if reason is not None:
            self.reason = reason

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.reason == other.reason
            and self.message == other.message
        )

    def __hash__(self) -> int:
        return hash((type(self), self.reason, self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class InvalidChannelName(ValidationError):
    reason = ValidationReason.INVALID_CHANNEL_NAME


class ChannelNameTooLong(InvalidChannelName):
    reason = ValidationReason.CHANNEL_NAME_TOO_LONG


class EventNameTooLong(ValidationError):
    reason = ValidationReason.EVENT_NAME_TOO_LONG


class PayloadTooLarge(ValidationError):
    reason = ValidationReason.PAYLOAD_TOO_LARGE


class TooManyChannels(ValidationError):
    reason = ValidationReason.TOO_MANY_CHANNELS


class InvalidPayload(ValidationError):
    reason = ValidationReason.INVALID_PAYLOAD


class TransportError(PusherError):
    """The HTTP call failed or returned a non-2xx status."""

    def __init__(self, message: str, status: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.body = body


class DecodeError(PusherError):
    """The response body was not a JSON object."""

    def __init__(self, message: str, body: str):
        super().__init__(message)
        self.body = body


@dataclass(frozen=True)
class Success:
    data: Dict[str, Any]

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    error: PusherError

    @property
    def ok(self) -> bool:
        return False


PusherResponse = Union[Success, Failure]
