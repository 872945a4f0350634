"""Base Page Object driven by a declarative locator map.

Each page class declares ``locators``: logical name -> ``Locator``.  Maps
are merged down the class hierarchy and may be overridden per instance, so
one class serves every deployment of a logical page instead of being
hand-copied per test.

Self-healing: ``find()`` tries the primary rule, then falls back through the
locator's alternative CSS selectors.  Successful fallbacks are logged so the
canonical locator can be updated later.

Every action performs exactly one browser operation and appends one entry to
the scenario's ``ActionLog``.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Mapping

from playwright.sync_api import Locator as PlaywrightLocator
from playwright.sync_api import Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from ..action_log import ActionLog
from ..errors import ElementNotFound, ElementNotInteractable
from ..locators import Locator

logger = logging.getLogger("ui-scenarios.pom")


class BasePage:
    """Abstract base for all page objects."""

    # Subclasses should override with the page-specific path segment.
    path: ClassVar[str] = "/"
    locators: ClassVar[dict[str, Locator]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        merged: dict[str, Locator] = {}
        for base in reversed(cls.__mro__[1:]):
            merged.update(getattr(base, "locators", {}))
        merged.update(cls.__dict__.get("locators", {}))
        cls.locators = merged

    def __init__(
        self,
        page: Page,
        base_url: str = "http://localhost:3000",
        *,
        log: ActionLog | None = None,
        overrides: Mapping[str, Locator] | None = None,
        timeout_ms: float = 5_000,
    ) -> None:
        self.page = page
        self.base_url = base_url.rstrip("/")
        self.log = log if log is not None else ActionLog()
        self.timeout_ms = timeout_ms
        self._locators = dict(self.locators)
        for name, locator in (overrides or {}).items():
            self._locators[name] = locator if locator.name == name else locator.renamed(name)

    # ------------------------------------------------------------------
    # Locator map
    # ------------------------------------------------------------------

    def locator(self, name: str) -> Locator:
        try:
            return self._locators[name]
        except KeyError:
            raise KeyError(f"{type(self).__name__} has no locator named '{name}'") from None

    def _record(self, step: str, **params: Any) -> None:
        self.log.record(step, params, page=type(self).__name__)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def navigate(self) -> None:
        """Go to the page's canonical URL."""
        url = f"{self.base_url}{self.path}"
        self._record("navigate", url=url)
        self.page.goto(url)

    def reload(self) -> None:
        self._record("reload")
        self.page.reload()

    @property
    def title(self) -> str:
        return self.page.title()

    @property
    def url(self) -> str:
        return self.page.url

    def wait_for_load(self, state: str = "networkidle") -> None:
        """Wait until the page reaches the given load state."""
        self.page.wait_for_load_state(state)

    def wait_for_path(self, pattern: str, *, timeout: float | None = None) -> None:
        """Wait for navigation to a URL matching the glob *pattern*."""
        self.page.wait_for_url(pattern, timeout=self.timeout_ms if timeout is None else timeout)

    def is_at(self) -> bool:
        return self.path != "/" and self.path in self.page.url

    # ------------------------------------------------------------------
    # Self-healing resolution
    # ------------------------------------------------------------------

    def find(
        self,
        target: str | Locator,
        *,
        timeout: float | None = None,
        state: str = "visible",
    ) -> PlaywrightLocator:
        """Resolve a locator, waiting for it, with self-healing fallback chain.

        Parameters
        ----------
        target:
            A logical name from the page's locator map, or a ``Locator``.
        timeout:
            Milliseconds to wait for each candidate before trying the next.
        state:
            Element state to wait for (``visible``, ``attached``).

        Returns
        -------
        Locator
            The Playwright locator for the first candidate that resolved.

        Raises
        ------
        ElementNotFound
            When neither the primary rule nor any fallback resolves.
        """
        locator = self.locator(target) if isinstance(target, str) else target
        wait_ms = self.timeout_ms if timeout is None else timeout
        last_error: Exception | None = None

        for candidate in [locator, *locator.fallback_locators()]:
            handle = candidate.resolve(self.page)
            try:
                handle.first.wait_for(state=state, timeout=wait_ms)
            except PlaywrightTimeoutError as exc:
                last_error = exc
                logger.debug("Locator '%s' (%s) not %s, trying next fallback", locator.name, candidate.value, state)
                continue
            if candidate is not locator:
                logger.warning(
                    "Self-healed: primary '%s' for '%s' failed, used fallback '%s'",
                    locator.value,
                    locator.name,
                    candidate.value,
                )
            return handle

        raise ElementNotFound(locator.name, locator.scope, locator.selectors()) from last_error

    def _interactive(self, target: str | Locator, action: str) -> PlaywrightLocator:
        handle = self.find(target)
        if not handle.is_enabled():
            name = target if isinstance(target, str) else target.name
            raise ElementNotInteractable(name, action)
        return handle

    @staticmethod
    def _label(target: str | Locator) -> str:
        return target if isinstance(target, str) else target.describe()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def fill(self, target: str | Locator, value: str, *, sensitive: bool = False) -> None:
        """Fill a form input."""
        label = self._label(target)
        self.log.record(
            "fill",
            {label: value},
            page=type(self).__name__,
            sensitive=frozenset({label}) if sensitive else frozenset(),
        )
        self._interactive(target, "fill").fill(value)

    def click(self, target: str | Locator, **kwargs: Any) -> None:
        """Click the element matching *target*."""
        self._record("click", element=self._label(target))
        self._interactive(target, "click").click(**kwargs)

    def select(self, target: str | Locator, label: str) -> None:
        """Choose a dropdown option by its visible label."""
        self._record("select", element=self._label(target), option=label)
        self._interactive(target, "select").select_option(label=label)

    def set_checked(self, target: str | Locator, checked: bool) -> None:
        self._record("set_checked", element=self._label(target), checked=checked)
        self._interactive(target, "set_checked").set_checked(checked)

    def press(self, target: str | Locator, key: str) -> None:
        self._record("press", element=self._label(target), key=key)
        self._interactive(target, "press").press(key)

    def read_text(self, target: str | Locator) -> str:
        """Return the inner text of the matching element."""
        self._record("read_text", element=self._label(target))
        return self.find(target).inner_text()

    def read_value(self, target: str | Locator) -> str:
        self._record("read_value", element=self._label(target))
        return self.find(target).input_value()

    def read_all_texts(self, target: str | Locator) -> list[str]:
        """Inner texts of every match; an empty listing yields ``[]``."""
        self._record("read_all_texts", element=self._label(target))
        locator = self.locator(target) if isinstance(target, str) else target
        return [text.strip() for text in locator.resolve(self.page).all_inner_texts()]

    def screenshot(self, path: str = "screenshot.png") -> bytes:
        """Capture a full-page screenshot."""
        return self.page.screenshot(path=path, full_page=True)

    # ------------------------------------------------------------------
    # Predicates (no waiting, no log entry)
    # ------------------------------------------------------------------

    def _present(self, target: str | Locator) -> tuple[Locator, PlaywrightLocator]:
        """First candidate of the fallback chain that matches right now.

        Nothing waits here.  When no candidate matches, the primary rule is
        returned so the predicate reads the element as absent.
        """
        locator = self.locator(target) if isinstance(target, str) else target
        primary = locator.resolve(self.page)
        if not locator.fallbacks or primary.count() > 0:
            return locator, primary
        for candidate in locator.fallback_locators():
            handle = candidate.resolve(self.page)
            if handle.count() > 0:
                logger.debug("Predicate on '%s' matched fallback '%s'", locator.name, candidate.value)
                return locator, handle
        return locator, primary

    def _handle(self, target: str | Locator) -> PlaywrightLocator:
        locator, handle = self._present(target)
        return handle if locator.plural else handle.first

    def is_visible(self, target: str | Locator) -> bool:
        return self._handle(target).is_visible()

    def count(self, target: str | Locator) -> int:
        return self._present(target)[1].count()

    def is_checked(self, target: str | Locator) -> bool:
        return self._handle(target).is_checked()

    def peek_text(self, target: str | Locator) -> str:
        """Current text of the first match, without waiting."""
        return (self._handle(target).text_content() or "").strip()
