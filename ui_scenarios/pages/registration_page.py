"""Self-service registration page object."""

from __future__ import annotations

from typing import Any, Mapping

from ..locators import by_css, by_name, by_test_id
from .base_page import BasePage
from .user_form_page import field_error_locator

REGISTRATION_FIELDS: tuple[str, ...] = (
    "first_name",
    "last_name",
    "username",
    "email",
    "password",
    "confirm_password",
)


class RegistrationPage(BasePage):
    """Public sign-up form."""

    path = "/register"

    locators = {
        "first_name": by_name("first_name", "firstName", fallbacks=("#firstName", "#first-name")),
        "last_name": by_name("last_name", "lastName", fallbacks=("#lastName", "#last-name")),
        "username": by_name("username", "username", fallbacks=("#username",)),
        "email": by_name("email", "email", fallbacks=("#email", 'input[type="email"]')),
        "password": by_name("password", "password", fallbacks=("#password",)),
        "confirm_password": by_name(
            "confirm_password",
            "confirmPassword",
            fallbacks=("#confirmPassword", "#confirm-password"),
        ),
        "terms": by_name("terms", "terms", fallbacks=('input[type="checkbox"]#terms',)),
        "submit": by_test_id(
            "submit",
            "register-button",
            fallbacks=('button[type="submit"]', 'button:has-text("Register")', 'button:has-text("Sign up")'),
        ),
        "success": by_css("success", ".alert-success", fallbacks=('[role="status"]', ".registration-success")),
        "form_error": by_css("form_error", ".alert-danger", fallbacks=('[role="alert"]',)),
    }

    def register(self, inputs: Mapping[str, Any]) -> None:
        """Fill the sign-up form from *inputs* and submit it."""
        for field in REGISTRATION_FIELDS:
            value = inputs.get(field)
            if value is not None:
                self.fill(field, str(value), sensitive="password" in field)
        if inputs.get("accept_terms") is not None:
            self.set_checked("terms", bool(inputs["accept_terms"]))
        self.click("submit")

    def success_text(self) -> str:
        return self.read_text("success")

    def field_error(self, field: str) -> str:
        return self.read_text(field_error_locator(field))

    def has_field_error(self, field: str) -> bool:
        return self.is_visible(field_error_locator(field))

    def has_success(self) -> bool:
        return self.is_visible("success")

    def has_form_error(self) -> bool:
        return self.is_visible("form_error")
