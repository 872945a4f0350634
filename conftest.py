"""Root conftest: shared fixtures available to all test layers."""

from __future__ import annotations

import os
from unittest.mock import MagicMock, patch

import pytest

from ui_scenarios.action_log import ActionLog
from ui_scenarios.config import UiConfig

pytest_plugins = ["pytester", "ui_scenarios.pytest_plugin"]

UI_ENV_VARS = (
    "ADMIN_BASE_URL",
    "ADMIN_USERNAME",
    "ADMIN_PASSWORD",
    "UI_ADMIN_USER",
    "UI_ADMIN_PASSWORD",
    "MAILPIT_URL",
    "MAILPIT_USERNAME",
    "MAILPIT_PASSWORD",
    "UI_HEADLESS",
    "UI_ACTION_TIMEOUT_MS",
    "UI_FEEDBACK_TIMEOUT",
    "UI_POLL_INTERVAL",
    "MAIL_TIMEOUT",
    "MAIL_POLL_INTERVAL",
    "UI_ARTIFACTS_DIR",
    "UI_UNIQUE_ADDRESSES",
    "UI_LOG_LEVEL",
    "UI_PATTERN_SUCCESS",
    "UI_PATTERN_FIELD_ERROR",
    "UI_PATTERN_FORM_ERROR",
    "UI_PATTERN_ACCESS_DENIED",
)


class FakeClock:
    """Deterministic monotonic clock; ``sleep`` advances it."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture()
def clean_env():
    """Ensure UI env vars are cleared for isolation."""
    with patch.dict(os.environ, {}, clear=False):
        for name in UI_ENV_VARS:
            os.environ.pop(name, None)
        yield


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def fast_config() -> UiConfig:
    """Config with tight budgets so failing waits finish quickly."""
    return UiConfig(
        base_url="https://admin.example.com",
        admin_username="admin",
        admin_password="AdminPass!1",
        action_timeout_ms=50,
        feedback_timeout=0.05,
        poll_interval=0.01,
        mail_timeout=0.05,
        mail_poll_interval=0.01,
        # Literal addresses so tests can assert on the app state by email.
        unique_addresses=False,
    )


@pytest.fixture()
def log() -> ActionLog:
    return ActionLog("unit")


@pytest.fixture()
def mock_page() -> MagicMock:
    """Playwright Page double whose locators resolve and are enabled."""
    page = MagicMock(name="page")
    page.url = "https://admin.example.com/"
    locator = page.locator.return_value
    locator.is_enabled.return_value = True
    locator.count.return_value = 1
    return page
