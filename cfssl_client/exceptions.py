"""Custom exception hierarchy for the CFSSL client.

All exceptions inherit from CFSSLClientError for consistent handling.
Operations report expected failures through CallResult; these exceptions
are what CallResult.unwrap() raises and what transports raise internally.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


class CFSSLClientError(Exception):
    """Base exception for all CFSSL client errors.

    Attributes:
        message: Human-readable error description.
        details: Additional context for audit logging.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Mapping[str, str | int | bool | None] | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Human-readable error description.
            details: Additional context for audit logging.
        """
        super().__init__(message)
        self.message = message
        self.details = dict(details) if details else {}

    def to_audit_dict(self) -> dict[str, str | int | bool | None]:
        """Return dictionary suitable for audit logging.

        Returns:
            Dictionary with exception type, message, and details.
        """
        return {
            "exception_type": self.__class__.__name__,
            "message": self.message,
            **self.details,
        }


class RequestValidationError(CFSSLClientError):
    """Request rejected before anything was sent to the service."""

    @classmethod
    def missing_certificate_or_domain(cls) -> RequestValidationError:
        """Create exception for bundle/certinfo calls without a target.

        Returns:
            RequestValidationError instance.
        """
        return cls(
            "Either 'certificate' or 'domain' is required",
            details={"reason": "no_certificate_or_domain"},
        )


class TransportError(CFSSLClientError):
    """The request could not be delivered or the reply could not be read."""

    @classmethod
    def connection_failed(cls, *, url: str, reason: str) -> TransportError:
        """Create exception for a failed connection.

        Args:
            url: URL that was being requested.
            reason: Why the connection failed.

        Returns:
            TransportError instance.
        """
        return cls(f"Connection to {url} failed: {reason}", details={"url": url, "reason": reason})

    @classmethod
    def timeout(cls, *, url: str, reason: str) -> TransportError:
        """Create exception for a request that timed out.

        Args:
            url: URL that was being requested.
            reason: Timeout description from the HTTP layer.

        Returns:
            TransportError instance.
        """
        return cls(f"Request to {url} timed out: {reason}", details={"url": url, "reason": reason})

    @classmethod
    def request_failed(cls, *, url: str, reason: str) -> TransportError:
        """Create exception for any other HTTP-level failure.

        Args:
            url: URL that was being requested.
            reason: Failure description from the HTTP layer.

        Returns:
            TransportError instance.
        """
        return cls(f"Request to {url} failed: {reason}", details={"url": url, "reason": reason})


class ResponseDecodeError(CFSSLClientError):
    """The service replied with something that is not a usable envelope."""

    @classmethod
    def empty_response(cls) -> ResponseDecodeError:
        """Create exception for an empty response body.

        Returns:
            ResponseDecodeError instance.
        """
        return cls("Empty response from CFSSL", details={"reason": "empty_response"})

    @classmethod
    def invalid_response(cls) -> ResponseDecodeError:
        """Create exception for a body that is not a valid envelope.

        Returns:
            ResponseDecodeError instance.
        """
        return cls("Invalid response from CFSSL", details={"reason": "invalid_response"})


class ServiceError(CFSSLClientError):
    """The service processed the request and reported a failure."""

    @classmethod
    def service_reported(cls, *, message: str) -> ServiceError:
        """Create exception carrying the service's first error message.

        Args:
            message: Error message from the response envelope.

        Returns:
            ServiceError instance.
        """
        return cls(message, details={"reason": "service_error"})

    @classmethod
    def generic(cls) -> ServiceError:
        """Create exception for a failure reported without any message.

        Returns:
            ServiceError instance.
        """
        return cls("CFSSL reported an error without a message", details={"reason": "generic_error"})


class ConfigurationError(CFSSLClientError):
    """Client configuration error."""

    @classmethod
    def invalid_config(cls, *, field: str, reason: str) -> ConfigurationError:
        """Create exception for invalid configuration.

        Args:
            field: The configuration field with the error.
            reason: Why the configuration is invalid.

        Returns:
            ConfigurationError instance.
        """
        return cls(f"Invalid configuration for '{field}': {reason}", details={"field": field, "reason": reason})

    @classmethod
    def missing_required(cls, *, field: str) -> ConfigurationError:
        """Create exception for missing required configuration.

        Args:
            field: The missing configuration field.

        Returns:
            ConfigurationError instance.
        """
        return cls(f"Missing required configuration: {field}", details={"field": field})
