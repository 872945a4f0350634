"""Pytest configuration for E2E tests with Playwright.

Runs against the admin application at ADMIN_BASE_URL; every test here is
skipped when that variable is not set.
"""

import os

import pytest
from playwright.sync_api import sync_playwright


def pytest_collection_modifyitems(config, items):
    if os.environ.get("ADMIN_BASE_URL"):
        return
    skip = pytest.mark.skip(reason="ADMIN_BASE_URL is not set")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(scope="session")
def browser(ui_config):
    """Launch browser for E2E tests."""
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=ui_config.headless)
        yield browser
        browser.close()


@pytest.fixture(scope="function")
def page(browser, ui_config):
    """Create a new page for each test."""
    context = browser.new_context(
        viewport={'width': 1920, 'height': 1080}
    )
    context.set_default_timeout(ui_config.action_timeout_ms)
    page = context.new_page()
    yield page
    page.close()
    context.close()


@pytest.fixture
def base_url(ui_config):
    """Base URL for the application."""
    return ui_config.base_url
