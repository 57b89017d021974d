"""Tests for audit logging helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from loguru import logger

from cfssl_client.audit.logger import (
    clear_correlation_id,
    configure_audit_logger,
    get_correlation_id,
    log_call_failed,
    log_request_rejected,
    log_request_sent,
    log_revocation,
    set_correlation_id,
)
from cfssl_client.config import AuditConfig, LogLevel

if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


# --- Fixtures ---


@pytest.fixture
def records() -> Generator[list[dict[str, Any]], None, None]:
    """Capture every loguru record emitted during the test."""
    captured: list[dict[str, Any]] = []
    sink_id = logger.add(lambda m: captured.append(m.record), level="DEBUG")
    yield captured
    logger.remove(sink_id)


@pytest.fixture(autouse=True)
def _reset_correlation_id() -> Generator[None, None, None]:
    yield
    clear_correlation_id()


class TestCorrelationId:
    """Tests for correlation id handling."""

    def test_generated_when_not_given(self) -> None:
        """A fresh UUID is generated by default."""
        correlation_id = set_correlation_id()

        assert len(correlation_id) == 36
        assert get_correlation_id() == correlation_id

    def test_explicit_value(self) -> None:
        """An explicit id is stored as given."""
        set_correlation_id("req-42")

        assert get_correlation_id() == "req-42"

    def test_clear(self) -> None:
        """Clearing resets to the empty string."""
        set_correlation_id("req-42")
        clear_correlation_id()

        assert get_correlation_id() == ""


class TestAuditEvents:
    """Tests for the structured audit events."""

    def test_request_sent_records_field_names_only(self, records: list[dict[str, Any]]) -> None:
        """Field names are recorded, sorted, at debug level."""
        set_correlation_id("req-1")

        log_request_sent(method="POST", route="authsign", fields=["token", "request"])

        (record,) = records
        assert record["level"].name == "DEBUG"
        assert record["extra"]["event"] == "request_sent"
        assert record["extra"]["fields"] == "request,token"
        assert record["extra"]["correlation_id"] == "req-1"

    def test_missing_correlation_id_shown_as_dash(self, records: list[dict[str, Any]]) -> None:
        """Events outside a call carry a placeholder id."""
        log_request_rejected(operation="bundle", reason="no_certificate_or_domain")

        (record,) = records
        assert record["extra"]["correlation_id"] == "-"
        assert record["level"].name == "WARNING"

    def test_call_failed(self, records: list[dict[str, Any]]) -> None:
        """Failures carry the route and reason."""
        log_call_failed(route="sign", reason="Invalid certificate request")

        (record,) = records
        assert record["extra"]["event"] == "call_failed"
        assert record["extra"]["route"] == "sign"
        assert record["extra"]["reason"] == "Invalid certificate request"

    def test_revocation(self, records: list[dict[str, Any]]) -> None:
        """Revocations are logged with serial and AKI."""
        log_revocation(serial="01", authority_key_id="aabb", reason="superseded")

        (record,) = records
        assert record["extra"]["event"] == "revocation_requested"
        assert record["extra"]["serial_number"] == "01"
        assert record["extra"]["authority_key_id"] == "aabb"


class TestConfigureAuditLogger:
    """Tests for sink configuration."""

    def test_file_sink_receives_audit_events(self, tmp_path: Path) -> None:
        """Audit events are written to the configured file."""
        log_file = tmp_path / "logs" / "audit.log"
        configure_audit_logger(AuditConfig(log_file=log_file, log_level=LogLevel.INFO))
        try:
            log_call_failed(route="crl", reason="boom")
            logger.info("not an audit record")
        finally:
            logger.remove()

        content = log_file.read_text()
        assert "<call_failed>" in content
        assert "not an audit record" not in content

    def test_level_filters_debug_events(self, tmp_path: Path) -> None:
        """Debug events are dropped at INFO level."""
        log_file = tmp_path / "audit.log"
        configure_audit_logger(AuditConfig(log_file=log_file))
        try:
            log_request_sent(method="GET", route="scaninfo")
        finally:
            logger.remove()

        assert log_file.read_text() == ""
