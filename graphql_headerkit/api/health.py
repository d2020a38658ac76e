"""
Health Checks and Metrics Module

Endpoints for monitoring and observability.
"""

import logging
import threading
import time
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


class MetricsCollector:
    """
    Simple in-memory metrics collector.

    For distributed production, replace with Prometheus/StatsD.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._counters = defaultdict(int)
        self._histograms = defaultdict(list)
        self._start_time = time.time()

    def increment_counter(self, name: str, labels: Dict[str, str] = None, value: int = 1):
        """Increments counter."""
        with self._lock:
            key = self._make_key(name, labels)
            self._counters[key] += value

    def observe_histogram(self, name: str, value: float, labels: Dict[str, str] = None):
        """Adds observation to histogram."""
        with self._lock:
            key = self._make_key(name, labels)
            self._histograms[key].append(value)
            # Limit history to last 1000 observations
            if len(self._histograms[key]) > 1000:
                self._histograms[key] = self._histograms[key][-1000:]

    def _make_key(self, name: str, labels: Dict[str, str] = None) -> str:
        if not labels:
            return name
        label_str = ",".join(f"{k}={v}" for k, v in sorted(labels.items()))
        return f"{name}{{{label_str}}}"

    def get_metrics(self) -> Dict[str, Any]:
        """Returns all metrics."""
        with self._lock:
            return {
                "counters": dict(self._counters),
                "histograms": {
                    k: {
                        "count": len(v),
                        "sum": sum(v),
                        "avg": sum(v) / len(v) if v else 0,
                        "min": min(v) if v else 0,
                        "max": max(v) if v else 0,
                    }
                    for k, v in self._histograms.items()
                },
                "uptime_seconds": time.time() - self._start_time,
            }

    def reset(self):
        """Resets all metrics."""
        with self._lock:
            self._counters.clear()
            self._histograms.clear()


# Global singleton
_metrics = MetricsCollector()


def get_metrics_collector() -> MetricsCollector:
    """Returns the global metrics collector."""
    return _metrics


def track_request_inspected(outcome: str):
    """Tracks one inspected request (classified / empty / too_large)."""
    _metrics.increment_counter("graphql_requests_inspected_total", {"outcome": outcome})


def track_decode_fallback():
    """Tracks a body that was not a usable JSON envelope."""
    _metrics.increment_counter("graphql_body_decode_fallback_total")


def track_extraction_duration(duration: float):
    """Tracks time spent in the extractor."""
    _metrics.observe_histogram("graphql_extraction_duration_seconds", duration)


def get_health_status() -> Dict[str, Any]:
    """
    Returns system health status.

    Returns:
        Dict with status and details
    """
    from graphql_headerkit import __version__
    from graphql_headerkit.utils.config import config

    metrics = _metrics.get_metrics()

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "headers": {
            "queries": config.QUERY_HEADER,
            "mutations": config.MUTATION_HEADER,
        },
        "metrics": {
            "uptime_seconds": metrics["uptime_seconds"],
            "requests_inspected": sum(
                v
                for k, v in metrics["counters"].items()
                if k.startswith("graphql_requests_inspected_total")
            ),
        },
    }


async def health_endpoint(request):
    """
    Unified health check endpoint.

    Query params:
    - ?type=live: Liveness check (always returns 200 if process alive)
    - (default): Full health check with details
    """
    from starlette.responses import JSONResponse

    if request.query_params.get("type", "full") == "live":
        return JSONResponse({"alive": True}, status_code=200)

    return JSONResponse(get_health_status(), status_code=200)


async def metrics_endpoint(request):
    """Metrics snapshot in JSON (counters, histograms, uptime)."""
    from starlette.responses import JSONResponse

    return JSONResponse(_metrics.get_metrics())


def create_health_routes(prefix: str = "") -> List:
    """
    Build the health and metrics routes.

    Args:
        prefix: Optional path prefix (e.g. "/_headerkit")

    Returns:
        List of Starlette Route objects
    """
    from starlette.routing import Route

    routes = [
        Route(f"{prefix}/health", health_endpoint, methods=["GET"]),
        Route(f"{prefix}/metrics", metrics_endpoint, methods=["GET"]),
    ]

    logger.info(f"Health check routes registered: {prefix}/health, {prefix}/metrics")
    return routes
