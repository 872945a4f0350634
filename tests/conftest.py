"""Test-layer conftest: marker registration."""

from __future__ import annotations


def pytest_configure(config):
    """Register custom markers so --strict-markers does not complain."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Scenario runs against an in-memory admin app")
    config.addinivalue_line("markers", "e2e: End-to-end Playwright tests against a live app")
    config.addinivalue_line("markers", "slow: Slow-running tests")
    config.addinivalue_line("markers", "positive: Records expecting success")
    config.addinivalue_line("markers", "negative: Records expecting rejection")
    config.addinivalue_line("markers", "edge: Boundary and edge-case records")
