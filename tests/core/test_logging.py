"""Tests for JSON log formatting and request-id propagation."""
import json
import logging
import sys

from conftest import MERCHANT
from x402gate.core.config import Settings
from x402gate.core.logging import (
    JsonFormatter,
    RequestContextFilter,
    configure_logging,
    request_id_var,
)


def _record(msg: str = "event", **extra) -> logging.LogRecord:
    record = logging.LogRecord("x402gate.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def test_whitelisted_fields_only(self):
        line = JsonFormatter().format(_record(payment_ref="abc123", outcome="settle_success", secret="x"))
        payload = json.loads(line)

        assert payload["message"] == "event"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "x402gate.test"
        assert payload["payment_ref"] == "abc123"
        assert payload["outcome"] == "settle_success"
        assert "secret" not in payload
        assert "request_id" not in payload

    def test_custom_field_list(self):
        payload = json.loads(JsonFormatter(extra_fields=("outcome",)).format(_record(outcome="error", network="n")))
        assert payload["outcome"] == "error"
        assert "network" not in payload

    def test_exception_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())
        payload = json.loads(JsonFormatter().format(record))
        assert "RuntimeError: boom" in payload["exception"]


class TestRequestContextFilter:
    def test_takes_request_id_from_context(self):
        token = request_id_var.set("req-1")
        try:
            record = _record()
            assert RequestContextFilter().filter(record) is True
        finally:
            request_id_var.reset(token)
        assert record.request_id == "req-1"

    def test_explicit_request_id_wins(self):
        token = request_id_var.set("req-1")
        try:
            record = _record(request_id="req-2")
            RequestContextFilter().filter(record)
        finally:
            request_id_var.reset(token)
        assert record.request_id == "req-2"

    def test_outside_request(self):
        record = _record()
        RequestContextFilter().filter(record)
        assert record.request_id is None


class TestConfigureLogging:
    def test_level_and_handlers_from_settings(self, tmp_path):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            settings = Settings(
                merchant_address=MERCHANT,
                log_level="warning",
                log_file=str(tmp_path / "x402gate.log"),
                _env_file=None,
            )
            configure_logging(settings)

            assert root.level == logging.WARNING
            assert len(root.handlers) == 2
            for handler in root.handlers:
                assert isinstance(handler.formatter, JsonFormatter)
                assert any(isinstance(f, RequestContextFilter) for f in handler.filters)
        finally:
            for handler in root.handlers:
                if handler not in saved_handlers:
                    handler.close()
            root.handlers = saved_handlers
            root.setLevel(saved_level)


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []
        self.addFilter(RequestContextFilter())

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


def test_request_id_reaches_logs_inside_request(client):
    handler = _ListHandler()
    challenge_logger = logging.getLogger("x402gate.paywall.challenge")
    challenge_logger.addHandler(handler)
    try:
        resp = client.get("/api/data", headers={"X-Request-Id": "req-42"})
    finally:
        challenge_logger.removeHandler(handler)

    assert resp.status_code == 402
    (record,) = handler.records
    assert record.request_id == "req-42"
    assert request_id_var.get() is None
