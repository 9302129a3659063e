"""
Request assembly and dispatch.

Builds the signed request for an operation, runs its validators and hands
it to a transport. Validation failures short-circuit before any network
call is made.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Protocol, Tuple

import requests

from pusher_lib.config import PusherConfig
from pusher_lib.errors import DecodeError, Failure, PusherResponse, Success, TransportError
from pusher_lib.signature import sign_request
from pusher_lib.validation import Validator, run_validators

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


class Transport(Protocol):
    def request(
        self,
        method: str,
        url: str,
        params: Dict[str, str],
        body: Optional[str],
    ) -> Tuple[int, str]:
        ...


class RequestsTransport:
    """Transport backed by the requests library."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    def request(
        self,
        method: str,
        url: str,
        params: Dict[str, str],
        body: Optional[str],
    ) -> Tuple[int, str]:
        """
        Issue one HTTP call.

        Returns:
            Tuple of (status_code, response_text)

        Raises:
            TransportError: If the call could not be completed
        """
        # Only POST requests carry a JSON body
        headers = {"Content-Type": "application/json"} if body is not None else {}
        try:
            r = requests.request(
                method,
                url,
                params=params,
                data=body.encode("utf-8") if body is not None else None,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        return r.status_code, r.text


@dataclass(frozen=True)
class Request:
    config: PusherConfig
    method: str
    path: str
    params: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None

    @property
    def full_path(self) -> str:
        return f"/apps/{self.config.app_id}{self.path}"

    @property
    def url(self) -> str:
        return f"{self.config.base_url}{self.full_path}"


def decode_response(status: int, text: str) -> PusherResponse:
    """
    Turn a raw HTTP response into a result.

    Args:
        status: HTTP status code
        text: Response body

    Returns:
        Success with the decoded JSON object, or Failure
    """
    # Non-2xx responses carry the remote error text
    if not 200 <= status < 300:
        return Failure(TransportError(f"Unexpected status {status}", status=status, body=text))

    # Some endpoints answer with an empty body
    if not text.strip():
        return Success({})

    try:
        data = json.loads(text)
    except ValueError as e:
        return Failure(DecodeError(f"Malformed JSON response: {e}", body=text))

    if not isinstance(data, dict):
        return Failure(DecodeError("Response is not a JSON object", body=text))

    return Success(data)


def make_request(request: Request, transport: Optional[Transport] = None) -> PusherResponse:
    return validate_and_make_request(request, (), transport)


def validate_and_make_request(
    request: Request,
    validators: Iterable[Validator],
    transport: Optional[Transport] = None,
) -> PusherResponse:
    """
    Validate, sign and send a request.

    Args:
        request: The assembled request
        validators: Checks run in order; the first failure stops the call
        transport: HTTP transport (default: RequestsTransport)

    Returns:
        Success with the decoded response, or Failure with a PusherError
    """
    error = run_validators(validators)
    if error is not None:
        logger.debug("Rejected %s %s: %s", request.method, request.path, error.message)
        return Failure(error)

    # Validation passed; sign and send
    transport = transport or RequestsTransport()
    params = sign_request(
        request.config,
        request.method,
        request.full_path,
        request.params,
        request.body,
    )

    logger.debug("Sending %s %s", request.method, request.full_path)
    try:
        status, text = transport.request(request.method, request.url, params, request.body)
    except TransportError as e:
        logger.warning("Transport failure for %s %s: %s", request.method, request.full_path, e)
        return Failure(e)

    result = decode_response(status, text)
    if not result.ok:
        logger.warning("Request %s %s failed: %s", request.method, request.full_path, result.error)
    return result
