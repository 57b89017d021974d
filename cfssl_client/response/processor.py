"""Interpretation of CFSSL response envelopes.

Every CFSSL reply is wrapped in the same envelope::

    {"success": true, "result": {...}, "errors": [], "messages": []}

This module turns a raw reply body into a CallResult, keeping "the
service said nothing", "the service said something unreadable" and "the
service reported a failure" apart.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictBool, ValidationError

from cfssl_client.exceptions import (
    CFSSLClientError,
    RequestValidationError,
    ResponseDecodeError,
    ServiceError,
    TransportError,
)


class ErrorKind(str, Enum):
    """Failures that carry no message of their own."""

    EMPTY_RESPONSE = "empty_response"
    INVALID_RESPONSE = "invalid_response"
    GENERIC_ERROR = "generic_error"
    NO_CERTIFICATE_OR_DOMAIN = "no_certificate_or_domain"


CallError = ErrorKind | TransportError | str

_KIND_EXCEPTIONS = {
    ErrorKind.EMPTY_RESPONSE: ResponseDecodeError.empty_response,
    ErrorKind.INVALID_RESPONSE: ResponseDecodeError.invalid_response,
    ErrorKind.GENERIC_ERROR: ServiceError.generic,
    ErrorKind.NO_CERTIFICATE_OR_DOMAIN: RequestValidationError.missing_certificate_or_domain,
}


@dataclass(frozen=True)
class CallResult:
    """Outcome of one CFSSL call.

    On success ``result`` holds the envelope's ``result`` value. On failure
    ``error`` is the service's first error message, an ErrorKind, or the
    TransportError raised by the transport.
    """

    ok: bool
    result: Any = None
    error: CallError | None = None

    @classmethod
    def success(cls, result: Any = None) -> CallResult:
        """Create successful call result."""
        return cls(ok=True, result=result)

    @classmethod
    def failure(cls, error: CallError) -> CallResult:
        """Create failed call result."""
        return cls(ok=False, error=error)

    def unwrap(self) -> Any:
        """Return the result, or raise the exception matching the error."""
        if self.ok:
            return self.result
        raise self.to_exception()

    def to_exception(self) -> CFSSLClientError:
        """Build the exception describing this failure."""
        error = self.error
        if isinstance(error, TransportError):
            return error
        if isinstance(error, ErrorKind):
            return _KIND_EXCEPTIONS[error]()
        if isinstance(error, str):
            return ServiceError.service_reported(message=error)
        msg = f"CallResult has no error to raise (ok={self.ok})"
        raise RuntimeError(msg)


class ResponseMessage(BaseModel):
    """One entry of the envelope's ``errors`` or ``messages`` list."""

    model_config = ConfigDict(frozen=True)

    code: int | None = None
    message: str


class ResponseEnvelope(BaseModel):
    """The JSON object every CFSSL reply is wrapped in."""

    model_config = ConfigDict(frozen=True)

    success: StrictBool
    result: Any = None
    errors: list[ResponseMessage] | None = None
    messages: list[Any] | None = None


def extract_error_message(envelope: ResponseEnvelope) -> str | ErrorKind:
    """Return the first error message, or GENERIC_ERROR if there is none."""
    if envelope.errors:
        return envelope.errors[0].message
    return ErrorKind.GENERIC_ERROR


def process_response(body: str | bytes) -> CallResult:
    """Classify a raw reply body.

    Args:
        body: Reply body exactly as received, regardless of HTTP status.

    Returns:
        CallResult with the envelope's result, or the normalized error.
    """
    if not body:
        return CallResult.failure(ErrorKind.EMPTY_RESPONSE)

    try:
        envelope = ResponseEnvelope.model_validate_json(body)
    except ValidationError:
        return CallResult.failure(ErrorKind.INVALID_RESPONSE)

    if not envelope.success:
        return CallResult.failure(extract_error_message(envelope))

    # A successful envelope must say what the result is, even if null
    if "result" not in envelope.model_fields_set:
        return CallResult.failure(ErrorKind.INVALID_RESPONSE)

    return CallResult.success(envelope.result)
