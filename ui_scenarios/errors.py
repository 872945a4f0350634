"""Error taxonomy shared by page objects, the poller, and the scenario runner."""

from __future__ import annotations

from typing import Sequence


class ScenarioError(Exception):
    """Base class for every failure raised by ui_scenarios."""


class ElementNotFound(ScenarioError):
    """A locator did not resolve to any element within the action timeout."""

    def __init__(self, name: str, scope: str = "page", selectors: Sequence[str] = ()) -> None:
        self.name = name
        self.scope = scope
        self.selectors = tuple(selectors)
        message = f"Element '{name}' not found (scope: {scope})"
        if self.selectors:
            message += f"; tried {list(self.selectors)}"
        super().__init__(message)


class ElementNotInteractable(ScenarioError):
    """A resolved element refused an interactive action (disabled, read-only)."""

    def __init__(self, name: str, action: str) -> None:
        self.name = name
        self.action = action
        super().__init__(f"Element '{name}' is not interactable for action '{action}'")


class ConditionTimeout(ScenarioError):
    """An eventual condition was still unmet when its timeout expired."""

    def __init__(
        self,
        description: str,
        elapsed: float,
        last_error: BaseException | None = None,
    ) -> None:
        self.description = description
        self.elapsed = elapsed
        self.last_error = last_error
        message = f"Timed out after {elapsed:.2f}s waiting for: {description}"
        if last_error is not None:
            message += f" (last error: {last_error!r})"
        super().__init__(message)


class AssertionFailed(ScenarioError, AssertionError):
    """Observed business outcome differs from the expected one."""

    def __init__(self, description: str, expected: object, actual: object) -> None:
        self.description = description
        self.expected = expected
        self.actual = actual
        super().__init__(f"{description}: expected {expected!r}, got {actual!r}")
