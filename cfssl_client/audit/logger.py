"""Audit logging for calls made against the CA.

Provides structured logging with correlation IDs so that every request
sent to CFSSL, and the outcome reported back, can be traced. Request
bodies are never logged since they may carry tokens or private keys;
only route names and field names are recorded.
"""

from __future__ import annotations

import sys
import uuid
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from cfssl_client.config import AuditConfig


# Context variable for request correlation ID
_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Get the current correlation ID for request tracing."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Set correlation ID for current call context."""
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    _correlation_id.set(correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    """Clear the correlation ID after the call completes."""
    _correlation_id.set("")


_AUDIT_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} [{level}] "
    "[{extra[correlation_id]}] <{extra[event]}> {message} | {extra}"
)


def _is_audit_record(record: Any) -> bool:
    return record["extra"].get("audit", False)


def configure_audit_logger(config: AuditConfig) -> None:
    """Configure the audit logger based on settings."""
    logger.remove()

    logger.add(
        sys.stderr,
        level=config.log_level.value,
        format=_AUDIT_FORMAT,
        filter=_is_audit_record,
    )

    if config.log_file is None:
        return

    config.log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        str(config.log_file),
        level=config.log_level.value,
        format=_AUDIT_FORMAT,
        rotation="10 MB",
        retention="90 days",
        compression="gz",
        filter=_is_audit_record,
    )


def _get_audit_logger() -> Any:
    """Get logger bound with audit context."""
    return logger.bind(
        audit=True,
        correlation_id=get_correlation_id() or "-",
        event="",
    )


def log_request_sent(*, method: str, route: str, fields: Iterable[str] = ()) -> None:
    """Log a request about to be handed to the transport."""
    audit = _get_audit_logger().bind(
        event="request_sent",
        http_method=method,
        route=route,
        fields=",".join(sorted(fields)),
    )
    audit.debug("{} {}", method, route)


def log_request_rejected(*, operation: str, reason: str) -> None:
    """Log a request refused before reaching the network."""
    audit = _get_audit_logger().bind(
        event="request_rejected",
        operation=operation,
        reason=reason,
    )
    audit.warning("Request {} rejected: {}", operation, reason)


def log_call_succeeded(*, route: str) -> None:
    """Log a successful reply from the service."""
    audit = _get_audit_logger().bind(event="call_succeeded", route=route)
    audit.info("Call to {} succeeded", route)


def log_call_failed(*, route: str, reason: str) -> None:
    """Log a failure reported by, or decoded from, the service reply."""
    audit = _get_audit_logger().bind(
        event="call_failed",
        route=route,
        reason=reason,
    )
    audit.warning("Call to {} failed: {}", route, reason)


def log_transport_error(*, route: str, error: Exception) -> None:
    """Log a transport-level failure."""
    audit = _get_audit_logger().bind(
        event="transport_error",
        route=route,
        error_type=type(error).__name__,
        error_message=str(error),
    )
    audit.error("Transport error calling {}: {}", route, error)


def log_revocation(*, serial: str, authority_key_id: str, reason: str) -> None:
    """Log a revocation request."""
    audit = _get_audit_logger().bind(
        event="revocation_requested",
        serial_number=serial,
        authority_key_id=authority_key_id,
        reason=reason,
    )
    audit.info("Revocation requested for serial {}", serial)
