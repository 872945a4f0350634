"""Fixed-interval polling for effects that become observable eventually.

Only facts that are genuinely eventual (a toast after async processing, an
email after delivery) go through here.  Correctness checks never retry.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Callable

from .errors import AssertionFailed, ConditionTimeout

logger = logging.getLogger("ui-scenarios.polling")

Clock = Callable[[], float]
Sleep = Callable[[float], None]


@dataclass(frozen=True)
class EventualCondition:
    """Predicate over observable state with its own time budget.

    ``probe`` returns a witness: any truthy value means the condition holds
    and that value is handed back to the caller.  Exceptions whose type is
    listed in ``retry_on`` count as "not yet"; anything else propagates.
    """

    description: str
    probe: Callable[[], Any]
    timeout: float = 5.0
    interval: float = 0.5
    retry_on: tuple[type[BaseException], ...] = ()

    def wait(self, **kwargs: Any) -> Any:
        return wait_for(self, **kwargs)


def _evaluate(condition: EventualCondition) -> tuple[Any, BaseException | None]:
    try:
        return condition.probe(), None
    except condition.retry_on as exc:
        logger.debug("Probe for '%s' raised %r; treating as unmet", condition.description, exc)
        return None, exc


def wait_for(
    condition: EventualCondition,
    *,
    timeout: float | None = None,
    interval: float | None = None,
    clock: Clock = time.monotonic,
    sleep: Sleep = time.sleep,
) -> Any:
    """Poll *condition* until it yields a truthy witness.

    Parameters
    ----------
    condition:
        The condition to evaluate.
    timeout, interval:
        Override the condition's own budget, in seconds.
    clock, sleep:
        Injected for tests; default to the monotonic clock and ``time.sleep``.

    Returns
    -------
    Any
        The first truthy value returned by the probe.

    Raises
    ------
    ConditionTimeout
        When the condition is still unmet after *timeout* seconds.
    """
    budget = condition.timeout if timeout is None else timeout
    step = condition.interval if interval is None else interval
    if budget < 0 or step <= 0:
        raise ValueError("timeout must be >= 0 and interval > 0")

    started = clock()
    attempts = 0
    while True:
        attempts += 1
        witness, last_error = _evaluate(condition)
        elapsed = clock() - started
        if witness:
            logger.info(
                "Condition met: %s (%.2fs, %d attempt(s))", condition.description, elapsed, attempts
            )
            return witness
        if elapsed >= budget:
            logger.warning(
                "Condition timed out: %s (%.2fs, %d attempt(s))", condition.description, elapsed, attempts
            )
            raise ConditionTimeout(condition.description, elapsed, last_error)
        sleep(min(step, budget - elapsed))


def ensure_absent(
    condition: EventualCondition,
    *,
    window: float | None = None,
    interval: float | None = None,
    clock: Clock = time.monotonic,
    sleep: Sleep = time.sleep,
) -> None:
    """Check that *condition* stays unmet for the whole *window*.

    Raises ``AssertionFailed`` carrying the witness as soon as one appears.
    """
    budget = condition.timeout if window is None else window
    step = condition.interval if interval is None else interval
    if budget < 0 or step <= 0:
        raise ValueError("window must be >= 0 and interval > 0")
    started = clock()
    while True:
        witness, _ = _evaluate(condition)
        if witness:
            raise AssertionFailed(f"Expected no occurrence of: {condition.description}", None, witness)
        elapsed = clock() - started
        if elapsed >= budget:
            logger.info("Confirmed absent for %.2fs: %s", elapsed, condition.description)
            return
        sleep(min(step, budget - elapsed))


# ----------------------------------------------------------------------
# Condition factories over page objects
# ----------------------------------------------------------------------


def element_visible(page_obj: Any, name: str, *, timeout: float = 5.0, interval: float = 0.25) -> EventualCondition:
    return EventualCondition(
        f"'{name}' visible on {type(page_obj).__name__}",
        lambda: page_obj.is_visible(name),
        timeout=timeout,
        interval=interval,
    )


def element_hidden(page_obj: Any, name: str, *, timeout: float = 5.0, interval: float = 0.25) -> EventualCondition:
    return EventualCondition(
        f"'{name}' hidden on {type(page_obj).__name__}",
        lambda: not page_obj.is_visible(name),
        timeout=timeout,
        interval=interval,
    )


def text_matches(
    page_obj: Any,
    name: str,
    pattern: str,
    *,
    timeout: float = 5.0,
    interval: float = 0.25,
) -> EventualCondition:
    """Witness is the element text once it matches *pattern* (case-insensitive)."""
    compiled = re.compile(pattern, re.IGNORECASE)

    def probe() -> str | None:
        if not page_obj.is_visible(name):
            return None
        text = page_obj.peek_text(name)
        return text if compiled.search(text) else None

    return EventualCondition(
        f"'{name}' text matching /{pattern}/ on {type(page_obj).__name__}",
        probe,
        timeout=timeout,
        interval=interval,
    )


def count_at_least(
    page_obj: Any,
    name: str,
    minimum: int,
    *,
    timeout: float = 5.0,
    interval: float = 0.25,
) -> EventualCondition:
    """Witness is the observed count once it reaches *minimum*."""
    if minimum < 1:
        raise ValueError("minimum must be at least 1; a zero count is not a witness")

    def probe() -> int | None:
        observed = page_obj.count(name)
        return observed if observed >= minimum else None

    return EventualCondition(
        f"at least {minimum} '{name}' on {type(page_obj).__name__}",
        probe,
        timeout=timeout,
        interval=interval,
    )


def url_contains(page_obj: Any, fragment: str, *, timeout: float = 5.0, interval: float = 0.25) -> EventualCondition:
    return EventualCondition(
        f"URL containing '{fragment}'",
        lambda: page_obj.url if fragment in page_obj.url else None,
        timeout=timeout,
        interval=interval,
    )
