"""Tests for audit events, metrics and the health routes."""

from __future__ import annotations

import json
import logging

import pytest
from starlette.applications import Starlette
from starlette.testclient import TestClient

from graphql_headerkit.api.health import (
    MetricsCollector,
    create_health_routes,
    get_health_status,
    track_request_inspected,
)
from graphql_headerkit.utils.audit import AuditLogger


class TestAuditLogger:
    def test_emits_single_line_json(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="graphql_headerkit.utils.audit")
        AuditLogger().operations_classified("POST", "/graphql", ["a"], ["b"])

        event = json.loads(caplog.records[-1].getMessage())
        assert event["event_type"] == "OPERATIONS_CLASSIFIED"
        assert event["queries"] == ["a"]
        assert event["mutations"] == ["b"]
        assert "timestamp" in event

    def test_fallback_and_size_events(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="graphql_headerkit.utils.audit")
        audit = AuditLogger()
        audit.body_decode_fallback("/graphql", "invalid JSON")
        audit.body_too_large("/graphql", 20, 10)

        events = [json.loads(r.getMessage()) for r in caplog.records]
        assert [e["event_type"] for e in events] == ["BODY_DECODE_FALLBACK", "BODY_TOO_LARGE"]
        assert events[1]["size"] == 20

    def test_environment_is_stamped_on_events(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="graphql_headerkit.utils.audit")
        AuditLogger(environment="staging").body_decode_fallback("/graphql", "invalid JSON")
        AuditLogger().body_decode_fallback("/graphql", "invalid JSON")

        stamped, plain = [json.loads(r.getMessage()) for r in caplog.records]
        assert stamped["env"] == "staging"
        assert "env" not in plain

    def test_disabled_logger_is_silent(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="graphql_headerkit.utils.audit")
        AuditLogger(enabled=False).body_too_large("/graphql", 20, 10)

        assert caplog.records == []


class TestMetricsCollector:
    def test_counters_with_labels(self) -> None:
        metrics = MetricsCollector()
        metrics.increment_counter("hits", {"outcome": "classified"})
        metrics.increment_counter("hits", {"outcome": "classified"}, value=2)

        assert metrics.get_metrics()["counters"] == {"hits{outcome=classified}": 3}

    def test_histogram_summary(self) -> None:
        metrics = MetricsCollector()
        for value in (1.0, 3.0):
            metrics.observe_histogram("duration", value)

        summary = metrics.get_metrics()["histograms"]["duration"]
        assert summary == {"count": 2, "sum": 4.0, "avg": 2.0, "min": 1.0, "max": 3.0}

    def test_reset(self) -> None:
        metrics = MetricsCollector()
        metrics.increment_counter("hits")
        metrics.reset()

        assert metrics.get_metrics()["counters"] == {}


class TestHealthRoutes:
    @pytest.fixture
    def client(self) -> TestClient:
        return TestClient(Starlette(routes=create_health_routes()))

    def test_full_health(self, client: TestClient) -> None:
        track_request_inspected("classified")
        resp = client.get("/health")

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["headers"]["queries"] == "X-GraphQL-Queries"
        assert body["metrics"]["requests_inspected"] == 1

    def test_liveness(self, client: TestClient) -> None:
        assert client.get("/health", params={"type": "live"}).json() == {"alive": True}

    def test_metrics(self, client: TestClient) -> None:
        body = client.get("/metrics").json()
        assert set(body) == {"counters", "histograms", "uptime_seconds"}

    def test_prefix(self) -> None:
        paths = [route.path for route in create_health_routes("/_headerkit")]
        assert paths == ["/_headerkit/health", "/_headerkit/metrics"]

    def test_health_status_reports_version(self) -> None:
        from graphql_headerkit import __version__

        assert get_health_status()["version"] == __version__
