"""Dashboard page object."""

from __future__ import annotations

from ..locators import by_css, by_role, by_test_id
from .base_page import BasePage


class DashboardPage(BasePage):
    """Page object for the landing screen shown after login."""

    path = "/dashboard"

    locators = {
        "heading": by_test_id("heading", "dashboard-heading", fallbacks=("h1", '[role="heading"]')),
        "nav": by_test_id("nav", "main-nav", fallbacks=("nav", '[role="navigation"]')),
        "user_menu": by_test_id("user_menu", "user-menu", fallbacks=('[aria-label="User menu"]', ".user-menu")),
        "logout": by_test_id("logout", "logout", fallbacks=('a:has-text("Log out")', 'button:has-text("Logout")')),
        "content": by_test_id("content", "content-area", fallbacks=("main", '[role="main"]')),
        "banner": by_css("banner", ".alert", fallbacks=('[role="status"]', ".toast", ".notification")),
        "access_denied": by_css(
            "access_denied",
            ".access-denied-message",
            fallbacks=('[data-testid="access-denied"]',),
        ),
    }

    def heading_text(self) -> str:
        return self.read_text("heading")

    def open_user_menu(self) -> None:
        self.click("user_menu")

    def navigate_to(self, link_text: str) -> None:
        """Click a navigation link by its visible text."""
        self.click(by_role(f"nav link '{link_text}'", "link", link_text).within(self.locator("nav")))

    def logout(self) -> None:
        self.open_user_menu()
        self.click("logout")

    def banner_text(self) -> str:
        return self.read_text("banner")

    def is_loaded(self) -> bool:
        return self.is_visible("content")

    def is_access_denied(self) -> bool:
        return self.is_visible("access_denied")

