"""
Unit tests for log formatting and request-id propagation.
"""

import json
import logging

import pytest

from app.core.logging import (
    JsonFormatter,
    PrettyFormatter,
    RequestIdFilter,
    get_request_id,
    latency_bucket_ms,
    request_id_ctx_var,
)


def _record(message="hello", **extra):
    record = logging.LogRecord("app.test", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.parametrize(
    "latency, bucket",
    [(None, "unknown"), (3, "<10ms"), (10, "10-100ms"), (250, "100-500ms"), (999, "500-1000ms"), (5000, ">=1000ms")],
)
def test_latency_bucket(latency, bucket):
    assert latency_bucket_ms(latency) == bucket


class TestRequestId:

    def test_filter_injects_context_request_id(self):
        token = request_id_ctx_var.set("rid-42")
        try:
            record = _record()
            RequestIdFilter().filter(record)
        finally:
            request_id_ctx_var.reset(token)

        assert record.request_id == "rid-42"

    def test_explicit_request_id_kept(self):
        record = _record(request_id="explicit")
        token = request_id_ctx_var.set("from-context")
        try:
            RequestIdFilter().filter(record)
        finally:
            request_id_ctx_var.reset(token)

        assert record.request_id == "explicit"

    def test_default_outside_request(self):
        assert get_request_id("none") == "none"


class TestFormatters:

    def test_json_line(self):
        record = _record("request.complete", request_id="rid-1", path="/api/health", status=200)

        payload = json.loads(JsonFormatter().format(record))

        assert payload["message"] == "request.complete"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "app.test"
        assert payload["request_id"] == "rid-1"
        assert payload["path"] == "/api/health"
        assert payload["status"] == 200
        assert payload["timestamp"].endswith("Z")
        assert "method" not in payload

    def test_pretty_line(self):
        line = PrettyFormatter().format(_record("started", request_id="rid-9"))

        assert "INFO [app.test] [rid=rid-9] started" in line

    def test_pretty_line_without_request_id(self):
        line = PrettyFormatter().format(_record("started", request_id=None))

        assert "[rid=" not in line
