"""Page-object driven, data-driven UI scenario runner for admin web apps."""

from .action_log import ActionEntry, ActionLog
from .config import MessagePatterns, UiConfig
from .errors import (
    AssertionFailed,
    ConditionTimeout,
    ElementNotFound,
    ElementNotInteractable,
    ScenarioError,
)
from .locators import Locator
from .polling import EventualCondition, ensure_absent, wait_for
from .records import ExpectedOutcome, RecordTable, TestDataRecord, load_table
from .runner import Phase, Scenario, ScenarioResult, ScenarioRunner, ScenarioSession

__all__ = [
    "ActionEntry",
    "ActionLog",
    "AssertionFailed",
    "ConditionTimeout",
    "ElementNotFound",
    "ElementNotInteractable",
    "EventualCondition",
    "ExpectedOutcome",
    "Locator",
    "MessagePatterns",
    "Phase",
    "RecordTable",
    "Scenario",
    "ScenarioError",
    "ScenarioResult",
    "ScenarioRunner",
    "ScenarioSession",
    "TestDataRecord",
    "UiConfig",
    "ensure_absent",
    "load_table",
    "wait_for",
]
