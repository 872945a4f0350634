"""Declarative locators resolved lazily against a Playwright page.

A ``Locator`` is pure data: a logical name plus a selection strategy.  It
becomes a Playwright handle only when ``resolve()`` is called, and resolution
never waits.  Waiting belongs to the page-object actions.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Sequence

STRATEGIES = ("css", "id", "name", "text", "role", "test_id", "label", "placeholder")


@dataclass(frozen=True)
class Locator:
    """Rule for finding one (or, when ``plural``, many) elements."""

    name: str
    strategy: str
    value: str
    exact: bool = False
    role_name: str | None = None
    has: Locator | None = None
    has_text: str | None = None
    parent: Locator | None = None
    plural: bool = False
    fallbacks: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.strategy not in STRATEGIES:
            raise ValueError(f"Unknown locator strategy '{self.strategy}' for '{self.name}'")
        if not self.value:
            raise ValueError(f"Locator '{self.name}' needs a non-empty value")

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def within(self, parent: Locator) -> Locator:
        """Scope this locator to the element matched by *parent*."""
        return replace(self, parent=parent)

    def containing(self, child: Locator) -> Locator:
        """Keep only matches that contain an element matching *child*."""
        return replace(self, has=child)

    def with_text(self, text: str) -> Locator:
        """Keep only matches whose text contains *text*."""
        return replace(self, has_text=text)

    def renamed(self, name: str) -> Locator:
        return replace(self, name=name)

    @property
    def scope(self) -> str:
        if self.parent is None:
            return "page"
        return self.parent.describe()

    def describe(self) -> str:
        """Human-readable identity, e.g. ``users.delete within users.row[text~'Jane']``."""
        label = self.name
        if self.has_text:
            label += f"[text~{self.has_text!r}]"
        if self.has is not None:
            label += f"[has {self.has.name}]"
        if self.parent is not None:
            label += f" within {self.parent.describe()}"
        return label

    def selectors(self) -> list[str]:
        """Primary selector description followed by the fallback chain."""
        return [f"{self.strategy}={self.value}", *self.fallbacks]

    def fallback_locators(self) -> list[Locator]:
        """Alternative CSS locators that keep this locator's scope and filters."""
        return [
            replace(self, strategy="css", value=selector, exact=False, role_name=None, fallbacks=())
            for selector in self.fallbacks
        ]

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, root: Any) -> Any:
        """Build the Playwright locator for this rule under *root*.

        *root* is a ``Page`` or an already-resolved Playwright ``Locator``.
        A non-plural parent narrows to its first match before scoping.
        """
        page = _page_of(root)
        if self.parent is not None:
            parent = self.parent.resolve(root)
            root = parent if self.parent.plural else parent.first

        if self.strategy == "css":
            handle = root.locator(self.value)
        elif self.strategy == "id":
            handle = root.locator(f'[id="{self.value}"]')
        elif self.strategy == "name":
            handle = root.locator(f'[name="{self.value}"]')
        elif self.strategy == "text":
            handle = root.get_by_text(self.value, exact=self.exact)
        elif self.strategy == "role":
            handle = root.get_by_role(self.value, name=self.role_name, exact=self.exact)
        elif self.strategy == "test_id":
            handle = root.get_by_test_id(self.value)
        elif self.strategy == "label":
            handle = root.get_by_label(self.value, exact=self.exact)
        else:
            handle = root.get_by_placeholder(self.value, exact=self.exact)

        if self.has is not None or self.has_text is not None:
            filters: dict[str, Any] = {}
            if self.has is not None:
                filters["has"] = self.has.resolve(page)
            if self.has_text is not None:
                filters["has_text"] = self.has_text
            handle = handle.filter(**filters)
        return handle


def _page_of(root: Any) -> Any:
    # Playwright locators expose their page; a Page does not.
    return getattr(root, "page", root)


# ----------------------------------------------------------------------
# Constructors
# ----------------------------------------------------------------------


def by_css(name: str, selector: str, *, fallbacks: Sequence[str] = (), plural: bool = False) -> Locator:
    return Locator(name, "css", selector, plural=plural, fallbacks=tuple(fallbacks))


def by_id(name: str, element_id: str, *, fallbacks: Sequence[str] = ()) -> Locator:
    return Locator(name, "id", element_id, fallbacks=tuple(fallbacks))


def by_name(name: str, attribute: str, *, fallbacks: Sequence[str] = ()) -> Locator:
    return Locator(name, "name", attribute, fallbacks=tuple(fallbacks))


def by_text(name: str, text: str, *, exact: bool = False, fallbacks: Sequence[str] = ()) -> Locator:
    return Locator(name, "text", text, exact=exact, fallbacks=tuple(fallbacks))


def by_role(
    name: str,
    role: str,
    accessible_name: str | None = None,
    *,
    exact: bool = False,
    plural: bool = False,
    fallbacks: Sequence[str] = (),
) -> Locator:
    return Locator(
        name,
        "role",
        role,
        exact=exact,
        role_name=accessible_name,
        plural=plural,
        fallbacks=tuple(fallbacks),
    )


def by_test_id(name: str, test_id: str, *, fallbacks: Sequence[str] = (), plural: bool = False) -> Locator:
    return Locator(name, "test_id", test_id, plural=plural, fallbacks=tuple(fallbacks))


def by_label(name: str, label: str, *, exact: bool = False, fallbacks: Sequence[str] = ()) -> Locator:
    return Locator(name, "label", label, exact=exact, fallbacks=tuple(fallbacks))


def by_placeholder(name: str, text: str, *, exact: bool = False, fallbacks: Sequence[str] = ()) -> Locator:
    return Locator(name, "placeholder", text, exact=exact, fallbacks=tuple(fallbacks))
