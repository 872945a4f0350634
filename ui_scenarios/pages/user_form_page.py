"""Add/edit user form page object."""

from __future__ import annotations

from typing import Any, Mapping

from ..locators import Locator, by_css, by_name
from .base_page import BasePage

# Order in which a user fills the form; select fields take option labels.
FORM_FIELDS: tuple[tuple[str, str], ...] = (
    ("name", "text"),
    ("first_name", "text"),
    ("last_name", "text"),
    ("username", "text"),
    ("email", "text"),
    ("role", "select"),
    ("access_level", "select"),
    ("password", "secret"),
)


def field_error_locator(field: str) -> Locator:
    return by_css(
        f"{field} error",
        f'[data-error-for="{field}"]',
        fallbacks=(f"#{field}-error", f'[name="{field}"] ~ .invalid-feedback', f'[name="{field}"] + .field-error'),
    )


class UserFormPage(BasePage):
    """Form used by admins to create or edit a user account."""

    path = "/admin/users/new"

    locators = {
        "name": by_name("name", "name", fallbacks=("#name", 'input[placeholder="Name"]')),
        "first_name": by_name("first_name", "firstName", fallbacks=("#first-name", "#firstName")),
        "last_name": by_name("last_name", "lastName", fallbacks=("#last-name", "#lastName")),
        "username": by_name("username", "username", fallbacks=("#username",)),
        "email": by_name("email", "email", fallbacks=("#email", 'input[type="email"]')),
        "role": by_name("role", "role", fallbacks=("#role", "select#user-role")),
        "access_level": by_name("access_level", "accessLevel", fallbacks=("#access-level", "select#accessLevel")),
        "password": by_name("password", "password", fallbacks=("#password", 'input[type="password"]')),
        "submit": by_css(
            "submit",
            'button[type="submit"]',
            fallbacks=('button:has-text("Save")', 'button:has-text("Create")', 'button:has-text("Update")'),
        ),
        "form_error": by_css("form_error", ".alert-danger", fallbacks=('[role="alert"]', ".form-error")),
    }

    def fill_form(self, inputs: Mapping[str, Any]) -> list[str]:
        """Fill every known field present in *inputs*, in workflow order.

        ``None`` values are left untouched; empty strings clear the field.
        Returns the names of the fields that were filled.
        """
        filled: list[str] = []
        for field, kind in FORM_FIELDS:
            value = inputs.get(field)
            if value is None:
                continue
            if kind == "select":
                self.select(field, str(value))
            else:
                self.fill(field, str(value), sensitive=kind == "secret")
            filled.append(field)
        return filled

    def submit(self) -> None:
        self.click("submit")

    def field_value(self, field: str) -> str:
        return self.read_value(field)

    def field_error(self, field: str) -> str:
        return self.read_text(field_error_locator(field))

    def form_error(self) -> str:
        return self.read_text("form_error")

    def has_field_error(self, field: str) -> bool:
        return self.is_visible(field_error_locator(field))

    def has_form_error(self) -> bool:
        return self.is_visible("form_error")

    def visible_field_errors(self) -> list[str]:
        return [field for field, _ in FORM_FIELDS if self.has_field_error(field)]
