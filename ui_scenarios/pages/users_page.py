"""User management listing page object."""

from __future__ import annotations

from dataclasses import replace

from ..locators import Locator, by_css, by_test_id, by_text
from .base_page import BasePage


class UserManagementPage(BasePage):
    """Admin listing of user accounts with search, add, edit, and delete."""

    path = "/admin/users"

    locators = {
        "search": by_test_id(
            "search",
            "user-search",
            fallbacks=("#user-search", 'input[placeholder*="Search"]', 'input[type="search"]'),
        ),
        "search_button": by_css("search_button", "button#search-user", fallbacks=('button:has-text("Search")',)),
        "rows": by_css("rows", "table tbody tr", fallbacks=('[role="row"]',), plural=True),
        "add_user": by_test_id(
            "add_user",
            "add-user-button",
            fallbacks=('button:has-text("Add User")', 'a:has-text("Add New User")'),
        ),
        "edit": by_css("edit", "button.edit-user", fallbacks=('button:has-text("Edit")',)),
        "delete": by_css("delete", "button.delete-user", fallbacks=('button:has-text("Delete")',)),
        "confirm_delete": by_css(
            "confirm_delete",
            '[role="dialog"] button.confirm',
            fallbacks=('button:has-text("Confirm")', 'button:has-text("Yes")'),
        ),
        "cancel_delete": by_css(
            "cancel_delete",
            '[role="dialog"] button.cancel',
            fallbacks=('button:has-text("Cancel")', 'button:has-text("No")'),
        ),
        "success": by_css("success", ".toast-success", fallbacks=(".alert-success", '[role="status"]')),
        "error": by_css("error", ".alert-danger", fallbacks=(".toast-error", '[role="alert"]')),
    }

    # ------------------------------------------------------------------
    # Row locators
    # ------------------------------------------------------------------

    def row(self, key: str) -> Locator:
        """The listing row containing a cell whose text equals *key*."""
        cell = by_text(f"cell '{key}'", key, exact=True)
        return replace(self.locator("rows"), name=f"row '{key}'", plural=False).containing(cell)

    def row_action(self, action: str, key: str) -> Locator:
        """The *action* button (``edit``/``delete``) inside the row for *key*."""
        return self.locator(action).within(self.row(key))

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def search(self, term: str) -> None:
        self.fill("search", term)
        if self.is_visible("search_button"):
            self.click("search_button")
        else:
            self.press("search", "Enter")

    def open_add_user(self) -> None:
        self.click("add_user")

    def open_edit_user(self, key: str) -> None:
        self.click(self.row_action("edit", key))

    def delete_user(self, key: str, *, confirm: bool = True) -> None:
        self.click(self.row_action("delete", key))
        self.click("confirm_delete" if confirm else "cancel_delete")

    def row_text(self, key: str) -> str:
        return self.read_text(self.row(key))

    def success_text(self) -> str:
        return self.read_text("success")

    def error_text(self) -> str:
        return self.read_text("error")

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def has_user(self, key: str) -> bool:
        return self.count(self.row(key)) > 0

    def row_count(self) -> int:
        return self.count("rows")

    def has_success(self) -> bool:
        return self.is_visible("success")

    def has_error(self) -> bool:
        return self.is_visible("error")
