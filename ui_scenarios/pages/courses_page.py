"""Course management page object."""

from __future__ import annotations

from dataclasses import replace

from ..locators import Locator, by_css, by_name, by_text
from .base_page import BasePage


class CourseManagementPage(BasePage):
    """Admin listing of courses with category filters and availability toggles."""

    path = "/admin/courses"

    locators = {
        "rows": by_css("rows", "table.courses tbody tr", fallbacks=('[data-testid="course-row"]',), plural=True),
        "name_cells": by_css(
            "name_cells",
            "table.courses tbody td.course-name",
            fallbacks=('[data-testid="course-name"]',),
            plural=True,
        ),
        "availability": by_css(
            "availability",
            'input[type="checkbox"].availability-toggle',
            fallbacks=('[role="switch"]',),
        ),
        "select_all": by_css("select_all", 'thead input[type="checkbox"]', fallbacks=("#select-all",)),
        "bulk_action": by_name("bulk_action", "bulkAction", fallbacks=("#bulk-action",)),
        "apply_bulk": by_css("apply_bulk", "button#apply-bulk", fallbacks=('button:has-text("Apply")',)),
        "confirm": by_css(
            "confirm",
            '[role="dialog"] button.confirm',
            fallbacks=('button:has-text("Confirm")', 'button:has-text("Yes")'),
        ),
        "success": by_css("success", ".alert-success", fallbacks=(".toast-success", '[role="status"]')),
        "error": by_css("error", ".alert-danger", fallbacks=('[role="alert"]',)),
    }

    def filter_select(self, category_type: str) -> Locator:
        """Dropdown filtering the listing by *category_type* (term, year, department...)."""
        return by_name(f"{category_type} filter", category_type, fallbacks=(f"#filter-{category_type}",))

    def column_cells(self, column: str) -> Locator:
        return by_css(
            f"{column} cells",
            f"table.courses tbody td.course-{column}",
            fallbacks=(f'[data-testid="course-{column}"]',),
            plural=True,
        )

    def row(self, course: str) -> Locator:
        cell = by_text(f"course '{course}'", course, exact=True)
        return replace(self.locator("rows"), name=f"course row '{course}'", plural=False).containing(cell)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def filter_by(self, category_type: str, value: str) -> None:
        self.select(self.filter_select(category_type), value)

    def course_names(self) -> list[str]:
        return self.read_all_texts("name_cells")

    def course_categories(self, column: str) -> list[str]:
        return self.read_all_texts(self.column_cells(column))

    def set_available(self, course: str, available: bool) -> None:
        self.set_checked(self.locator("availability").within(self.row(course)), available)

    def select_all(self) -> None:
        self.set_checked("select_all", True)

    def apply_bulk_action(self, label: str, *, confirm: bool = True) -> None:
        self.select("bulk_action", label)
        self.click("apply_bulk")
        if confirm:
            self.click("confirm")

    def success_text(self) -> str:
        return self.read_text("success")

    def error_text(self) -> str:
        return self.read_text("error")

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def has_course(self, course: str) -> bool:
        return self.count(self.row(course)) > 0

    def is_available(self, course: str) -> bool:
        return self.is_checked(self.locator("availability").within(self.row(course)))

    def has_error(self) -> bool:
        return self.is_visible("error")
