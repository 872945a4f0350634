"""Login page object."""

from __future__ import annotations

from ..locators import by_css, by_test_id
from .base_page import BasePage


class LoginPage(BasePage):
    """Page object for the login/authentication screen.

    Self-healing selectors: each element has a data-testid primary and
    common fallbacks (id, name attribute, aria role).
    """

    path = "/login"

    locators = {
        "username": by_test_id(
            "username",
            "username-input",
            fallbacks=("#username", 'input[name="username"]', 'input[name="email"]', 'input[type="email"]'),
        ),
        "password": by_test_id(
            "password",
            "password-input",
            fallbacks=("#password", 'input[name="password"]', 'input[type="password"]'),
        ),
        "submit": by_test_id(
            "submit",
            "login-button",
            fallbacks=('button[type="submit"]', 'button:has-text("Log in")', 'button:has-text("Sign in")'),
        ),
        "error": by_test_id(
            "error",
            "login-error",
            fallbacks=('[role="alert"]', ".error-message", ".alert-danger"),
        ),
        "form": by_css("form", "form#login-form", fallbacks=("form:has(input[type='password'])",)),
    }

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def login(self, username: str, password: str) -> None:
        """Fill both fields and submit."""
        self.fill("username", username)
        self.fill("password", password, sensitive=True)
        self.click("submit")

    def error_text(self) -> str:
        return self.read_text("error")

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def has_error(self) -> bool:
        return self.is_visible("error")

    def is_displayed(self) -> bool:
        """True when the browser sits on the login screen (e.g. after a redirect)."""
        return self.is_at() or self.is_visible("form")
