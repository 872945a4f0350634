"""Scenario runner: Setup -> Act -> Verify -> Teardown for one data record.

A ``Scenario`` subclass describes one manual test case.  ``ScenarioRunner``
drives it against a ``ScenarioSession`` (the browser handles owned by the
run) and produces an immutable ``ScenarioResult``.  Failures in Setup, Act
or Verify are re-raised with the rendered action log attached as a note, so
pytest's failure report reads as the scenario's narrative.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

from .action_log import ActionEntry, ActionLog
from .config import UiConfig
from .errors import AssertionFailed
from .mailbox import Mailbox
from .pages.base_page import BasePage
from .polling import EventualCondition, wait_for
from .records import TestDataRecord, unique_address

logger = logging.getLogger("ui-scenarios.runner")

PageT = TypeVar("PageT", bound=BasePage)


class Phase(str, Enum):
    SETUP = "setup"
    ACT = "act"
    VERIFY = "verify"
    TEARDOWN = "teardown"
    DONE = "done"


@dataclass(frozen=True)
class ScenarioResult:
    """Outcome of one scenario run; never mutated after creation."""

    scenario: str
    record_id: str
    passed: bool
    phase: Phase
    log: tuple[ActionEntry, ...]
    error: str | None = None
    last_error_text: str | None = None
    duration: float = 0.0
    screenshot: str | None = None

    def render(self) -> str:
        status = "PASSED" if self.passed else f"FAILED in {self.phase.value}"
        lines = [f"{self.scenario}[{self.record_id}] {status} ({self.duration:.2f}s)"]
        if self.error:
            lines.append(f"  error: {self.error}")
        if self.last_error_text:
            lines.append(f"  last UI error: {self.last_error_text!r}")
        if self.screenshot:
            lines.append(f"  screenshot: {self.screenshot}")
        lines.extend(f"  {index:>3}. {entry.render()}" for index, entry in enumerate(self.log, 1))
        return "\n".join(lines)


class ScenarioSession:
    """Browser handles and collaborators owned by a single scenario run.

    The primary ``page`` belongs to the caller (usually a pytest fixture).
    Secondary contexts opened through ``open_secondary`` belong to the
    session and are closed by ``close()``.
    """

    def __init__(
        self,
        page: Any,
        config: UiConfig,
        *,
        log: ActionLog | None = None,
        browser: Any = None,
        mailbox: Mailbox | None = None,
        token: str | None = None,
    ) -> None:
        self.page = page
        self.config = config
        self.log = log if log is not None else ActionLog()
        self.browser = browser
        self.mailbox = mailbox
        self.token = token or uuid.uuid4().hex[:8]
        self._secondary: list[tuple[str, Any]] = []

    def pages(self, page_cls: type[PageT], page: Any = None) -> PageT:
        """Construct a page object bound to this session's log and config."""
        return page_cls(
            page if page is not None else self.page,
            self.config.base_url,
            log=self.log,
            timeout_ms=self.config.action_timeout_ms,
        )

    def open_secondary(self, label: str) -> Any:
        """Open an independent browser context (separate cookies) for a second actor."""
        if self.browser is None:
            raise RuntimeError("A browser is required to open a secondary context")
        self.log.record("open_secondary", {"label": label})
        context = self.browser.new_context()
        self._secondary.append((label, context))
        return context.new_page()

    def close(self) -> None:
        """Close secondary contexts, newest first."""
        while self._secondary:
            label, context = self._secondary.pop()
            self.log.record("close_secondary", {"label": label})
            context.close()

    def address(self, email: str) -> str:
        if not self.config.unique_addresses:
            return email
        return unique_address(email, self.token)


class Scenario:
    """One manual test case, applied to one ``TestDataRecord``.

    Subclasses implement ``act`` plus ``verify_success``/``verify_failure``;
    ``setup`` handles preconditions.  ``teardown`` releases the session's
    secondary contexts and may be extended.
    """

    name = "scenario"

    def __init__(self, session: ScenarioSession, record: TestDataRecord) -> None:
        self.session = session
        self.record = record
        self.config = session.config
        self.log = session.log

    def setup(self) -> None:
        pass

    def act(self) -> None:
        raise NotImplementedError

    def verify(self) -> None:
        if self.record.expected.success:
            self.verify_success()
        else:
            self.verify_failure()

    def verify_success(self) -> None:
        raise NotImplementedError

    def verify_failure(self) -> None:
        raise NotImplementedError

    def teardown(self) -> None:
        self.session.close()

    def observed_error(self) -> str | None:
        """Last error text visible on the UI, for diagnostics."""
        return None

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    def wait(self, condition: EventualCondition) -> Any:
        """Wait for UI feedback using the configured feedback budget."""
        return wait_for(condition, timeout=self.config.feedback_timeout, interval=self.config.poll_interval)

    def expected_pattern(self, default: str) -> str:
        return self.config.patterns.resolve(self.record.expected.message or default)

    def fail(self, description: str, expected: Any, actual: Any) -> None:
        raise AssertionFailed(description, expected, actual)


class ScenarioRunner:
    """Runs scenarios against one session and keeps their results."""

    def __init__(self, session: ScenarioSession) -> None:
        self.session = session
        self.results: list[ScenarioResult] = []

    def run(
        self,
        scenario_cls: type[Scenario],
        record: TestDataRecord,
        *,
        reraise: bool = True,
    ) -> ScenarioResult:
        """Run *record* through *scenario_cls*.

        Returns the ``ScenarioResult``.  When a phase fails and *reraise* is
        true, the original exception is re-raised after the result has been
        stored in ``results``; no phase is ever retried.  The result carries only
        the log entries recorded during this run.
        """
        scenario = scenario_cls(self.session, record)
        log = self.session.log
        start = len(log)
        outer_label, log.scenario = log.scenario, f"{scenario_cls.name}[{record.record_id}]"
        started = time.monotonic()
        phase = Phase.SETUP
        failure: BaseException | None = None

        logger.info("Scenario %s[%s] starting: %s", scenario_cls.name, record.record_id, record.description)
        try:
            scenario.setup()
            phase = Phase.ACT
            scenario.act()
            phase = Phase.VERIFY
            scenario.verify()
        except Exception as exc:
            failure = exc

        error_text = self._observed_error(scenario) if failure is not None else None
        screenshot = self._capture(scenario_cls.name, record) if failure is not None else None

        try:
            scenario.teardown()
        except Exception as exc:
            if failure is None:
                failure = exc
                phase = Phase.TEARDOWN
            else:
                logger.error("Teardown of %s also failed: %r", scenario_cls.name, exc)
        log.scenario = outer_label
        if failure is None:
            phase = Phase.DONE

        result = ScenarioResult(
            scenario=scenario_cls.name,
            record_id=record.record_id,
            passed=failure is None,
            phase=phase,
            log=log.entries[start:],
            error=repr(failure) if failure is not None else None,
            last_error_text=error_text,
            duration=time.monotonic() - started,
            screenshot=screenshot,
        )
        self.results.append(result)

        if failure is None:
            logger.info("Scenario %s[%s] passed in %.2fs", result.scenario, result.record_id, result.duration)
            return result

        logger.error("Scenario %s[%s] failed in %s: %s", result.scenario, result.record_id, phase.value, result.error)
        if reraise:
            failure.add_note(result.render())
            raise failure
        return result

    def _observed_error(self, scenario: Scenario) -> str | None:
        try:
            return scenario.observed_error()
        except Exception as exc:
            logger.warning("Could not read UI error text: %r", exc)
            return None

    def _capture(self, name: str, record: TestDataRecord) -> str | None:
        artifacts = self.session.config.artifacts_dir
        if artifacts is None:
            return None
        target = Path(artifacts) / f"{name}-{record.record_id}-{self.session.token}.png"
        try:
            self.session.page.screenshot(path=str(target), full_page=True)
        except Exception as exc:
            logger.warning("Screenshot capture failed: %r", exc)
            return None
        return str(target)
