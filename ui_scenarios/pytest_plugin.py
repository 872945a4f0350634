"""Pytest integration: scenario fixtures and action-log failure sections.

Enable with ``pytest_plugins = ["ui_scenarios.pytest_plugin"]`` in the root
conftest.  Browser fixtures (``browser``, ``page``) stay with the suite that
owns the browser; the fixtures here only wrap them.
"""

from __future__ import annotations

import pytest

from .action_log import ActionLog
from .config import UiConfig
from .mailbox import MailpitMailbox
from .runner import ScenarioRunner, ScenarioSession
from .utils.logging_utils import configure_json_logging

ACTION_LOG_ATTR = "_ui_action_log"


@pytest.fixture(scope="session")
def ui_config() -> UiConfig:
    config = UiConfig.from_env()
    configure_json_logging(config.log_level)
    return config


@pytest.fixture()
def action_log(request: pytest.FixtureRequest) -> ActionLog:
    """Per-test action log; attached to the report if the test fails."""
    log = ActionLog(request.node.name)
    setattr(request.node, ACTION_LOG_ATTR, log)
    return log


@pytest.fixture()
def mailbox(ui_config: UiConfig):
    if not ui_config.mailbox_enabled:
        pytest.skip("MAILPIT_URL is not configured")
    with MailpitMailbox(
        ui_config.mailpit_url,
        username=ui_config.mailpit_username or None,
        password=ui_config.mailpit_password or None,
    ) as client:
        yield client


@pytest.fixture()
def scenario_session(request: pytest.FixtureRequest, page, ui_config: UiConfig, action_log: ActionLog):
    """Session for one scenario run; secondary contexts are always closed.

    ``browser`` and ``mailbox`` are attached when the requesting test (or its
    suite) uses those fixtures.
    """
    browser = request.getfixturevalue("browser") if "browser" in request.fixturenames else None
    mailbox = request.getfixturevalue("mailbox") if "mailbox" in request.fixturenames else None
    session = ScenarioSession(page, ui_config, log=action_log, browser=browser, mailbox=mailbox)
    yield session
    session.close()


@pytest.fixture()
def scenario_runner(scenario_session: ScenarioSession) -> ScenarioRunner:
    return ScenarioRunner(scenario_session)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo):
    outcome = yield
    report = outcome.get_result()
    log = getattr(item, ACTION_LOG_ATTR, None)
    if report.failed and log is not None and len(log):
        report.sections.append(("ui action log", log.render()))
