"""Business-level assertions; failures carry expected and actual verbatim."""

from __future__ import annotations

import re
from typing import Any, Collection

from .errors import AssertionFailed


def check_equal(description: str, expected: Any, actual: Any) -> None:
    if expected != actual:
        raise AssertionFailed(description, expected, actual)


def check_true(description: str, observed: Any) -> None:
    if not observed:
        raise AssertionFailed(description, True, observed)


def check_false(description: str, observed: Any) -> None:
    if observed:
        raise AssertionFailed(description, False, observed)


def check_matches(description: str, pattern: str, text: str | None) -> None:
    """Case-insensitive regex search of *pattern* in *text*."""
    if text is None or re.search(pattern, text, re.IGNORECASE) is None:
        raise AssertionFailed(description, f"/{pattern}/i", text)


def check_contains(description: str, needle: Any, haystack: Collection[Any] | str) -> None:
    if needle not in haystack:
        raise AssertionFailed(description, f"contains {needle!r}", haystack)


def check_not_contains(description: str, needle: Any, haystack: Collection[Any] | str) -> None:
    if needle in haystack:
        raise AssertionFailed(description, f"does not contain {needle!r}", haystack)


def check_all(description: str, expected: Any, observed: Collection[Any]) -> None:
    """Every observed value equals *expected*; an empty collection fails."""
    mismatched = [value for value in observed if value != expected]
    if not observed or mismatched:
        raise AssertionFailed(description, f"all == {expected!r}", list(observed))
