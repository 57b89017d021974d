"""Contract tests for response processor module.

Tests envelope classification and error normalization.
"""

from __future__ import annotations

import pytest

from cfssl_client.exceptions import (
    RequestValidationError,
    ResponseDecodeError,
    ServiceError,
    TransportError,
)
from cfssl_client.response.processor import (
    CallResult,
    ErrorKind,
    ResponseEnvelope,
    extract_error_message,
    process_response,
)

# --- process_response Tests ---


class TestProcessResponse:
    """Tests for classifying raw reply bodies."""

    def test_empty_body(self) -> None:
        """Empty body is an empty response."""
        assert process_response("") == CallResult.failure(ErrorKind.EMPTY_RESPONSE)
        assert process_response(b"") == CallResult.failure(ErrorKind.EMPTY_RESPONSE)

    def test_non_json_body(self) -> None:
        """Text that is not JSON is an invalid response."""
        assert process_response("not json") == CallResult.failure(ErrorKind.INVALID_RESPONSE)

    def test_success_returns_result(self) -> None:
        """Successful envelope yields its result."""
        result = process_response('{"success": true, "result": {"cert": "X"}}')

        assert result.ok is True
        assert result.result == {"cert": "X"}
        assert result.error is None

    def test_success_with_full_envelope(self) -> None:
        """Empty errors and messages lists are fine on success."""
        body = b'{"success": true, "result": ["a"], "errors": [], "messages": []}'

        assert process_response(body) == CallResult.success(["a"])

    def test_failure_returns_first_message(self) -> None:
        """Failed envelope yields the first error message."""
        body = '{"success": false, "errors": [{"code": 9001, "message": "bad CSR"}, {"message": "other"}]}'

        assert process_response(body) == CallResult.failure("bad CSR")

    def test_failure_without_messages(self) -> None:
        """Failed envelope with an empty error list is a generic error."""
        assert process_response('{"success": false, "errors": []}') == CallResult.failure(ErrorKind.GENERIC_ERROR)

    def test_failure_with_null_errors(self) -> None:
        """A null error list is also a generic error."""
        body = '{"success": false, "result": null, "errors": null}'

        assert process_response(body) == CallResult.failure(ErrorKind.GENERIC_ERROR)

    def test_success_without_result_is_invalid(self) -> None:
        """A successful envelope must carry a result key."""
        assert process_response('{"success": true}') == CallResult.failure(ErrorKind.INVALID_RESPONSE)

    def test_success_with_null_result(self) -> None:
        """An explicit null result is still a result."""
        assert process_response('{"success": true, "result": null}') == CallResult.success(None)

    @pytest.mark.parametrize(
        "body",
        [
            "[1, 2, 3]",
            '"success"',
            '{"result": {}}',
            '{"success": "true", "result": {}}',
            '{"success": false, "errors": [{"code": 1}]}',
            '{"success": false, "errors": "broken"}',
            "   ",
        ],
    )
    def test_malformed_envelopes_are_invalid(self, body: str) -> None:
        """Anything that is not a well-formed envelope is invalid."""
        assert process_response(body) == CallResult.failure(ErrorKind.INVALID_RESPONSE)


class TestExtractErrorMessage:
    """Tests for error message extraction."""

    def test_first_message(self) -> None:
        """The first entry wins."""
        envelope = ResponseEnvelope.model_validate(
            {"success": False, "errors": [{"message": "first"}, {"message": "second"}]},
        )

        assert extract_error_message(envelope) == "first"

    def test_generic_marker(self) -> None:
        """No entries means no message is made up."""
        envelope = ResponseEnvelope.model_validate({"success": False, "errors": []})

        assert extract_error_message(envelope) is ErrorKind.GENERIC_ERROR


# --- CallResult Tests ---


class TestCallResult:
    """Tests for CallResult dataclass."""

    def test_success_result(self) -> None:
        """Success result is ok with no error."""
        result = CallResult.success({"a": 1})

        assert result.ok is True
        assert result.unwrap() == {"a": 1}

    def test_bare_success(self) -> None:
        """Success without payload."""
        result = CallResult.success()

        assert result.ok is True
        assert result.result is None

    def test_failure_result(self) -> None:
        """Failure result carries the error."""
        result = CallResult.failure("bad CSR")

        assert result.ok is False
        assert result.error == "bad CSR"

    def test_unwrap_service_message(self) -> None:
        """Service messages raise ServiceError with that message."""
        with pytest.raises(ServiceError, match="bad CSR"):
            CallResult.failure("bad CSR").unwrap()

    @pytest.mark.parametrize(
        ("kind", "exception", "reason"),
        [
            (ErrorKind.EMPTY_RESPONSE, ResponseDecodeError, "empty_response"),
            (ErrorKind.INVALID_RESPONSE, ResponseDecodeError, "invalid_response"),
            (ErrorKind.GENERIC_ERROR, ServiceError, "generic_error"),
            (ErrorKind.NO_CERTIFICATE_OR_DOMAIN, RequestValidationError, "no_certificate_or_domain"),
        ],
    )
    def test_unwrap_error_kinds(self, kind: ErrorKind, exception: type, reason: str) -> None:
        """Each error kind maps to its exception."""
        with pytest.raises(exception) as exc_info:
            CallResult.failure(kind).unwrap()

        assert exc_info.value.details["reason"] == reason

    def test_unwrap_transport_error_is_reraised(self) -> None:
        """Transport errors are raised as the very same instance."""
        error = TransportError.connection_failed(url="/api/v1/cfssl/sign", reason="refused")

        with pytest.raises(TransportError) as exc_info:
            CallResult.failure(error).unwrap()

        assert exc_info.value is error

    def test_to_audit_dict(self) -> None:
        """Exceptions expose their details for logging."""
        audit = CallResult.failure(ErrorKind.EMPTY_RESPONSE).to_exception().to_audit_dict()

        assert audit == {
            "exception_type": "ResponseDecodeError",
            "message": "Empty response from CFSSL",
            "reason": "empty_response",
        }
