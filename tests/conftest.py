"""Shared fixtures for tests."""

import pytest

from graphql_headerkit.api.health import get_metrics_collector


@pytest.fixture(autouse=True)
def _reset_metrics():
    """Every test starts from empty counters."""
    get_metrics_collector().reset()
    yield
    get_metrics_collector().reset()
