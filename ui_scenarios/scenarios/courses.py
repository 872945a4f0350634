"""Course management scenarios: availability toggles and category filters."""

from __future__ import annotations

from ..checks import check_all, check_contains, check_equal, check_matches, check_true
from ..pages import CourseManagementPage
from ..polling import EventualCondition, text_matches
from ..runner import Scenario
from .common import admin_login

BULK_LABELS = {True: "Make Available", False: "Make Unavailable"}


class CourseAvailabilityScenario(Scenario):
    """Toggle one course, or bulk-update every course in a filtered category.

    Inputs: ``available`` plus either ``course`` or ``category_type`` and
    ``category``.
    """

    name = "course_availability"

    def setup(self) -> None:
        admin_login(self.session)
        self.courses = self.session.pages(CourseManagementPage)
        self.courses.navigate()
        self.target = bool(self.record["available"])
        self.course = self.record.get("course")
        if self.course:
            check_true(f"precondition: course '{self.course}' listed", self.courses.has_course(self.course))
            self.initial = self.courses.is_available(self.course)

    def act(self) -> None:
        if self.course:
            self.courses.set_available(self.course, self.target)
            return
        self.courses.filter_by(self.record["category_type"], self.record["category"])
        self.courses.select_all()
        self.courses.apply_bulk_action(self.record.get("bulk_action", BULK_LABELS[self.target]))

    def verify_success(self) -> None:
        pattern = self.expected_pattern("success")
        text = self.wait(text_matches(self.courses, "success", pattern))
        check_matches("availability confirmation", pattern, text)
        self.courses.reload()
        if self.course:
            check_equal(f"'{self.course}' availability", self.target, self.courses.is_available(self.course))
            return
        self.courses.filter_by(self.record["category_type"], self.record["category"])
        states = [self.courses.is_available(name) for name in self.courses.course_names()]
        check_all(f"availability of {self.record['category']} courses", self.target, states)

    def verify_failure(self) -> None:
        pattern = self.expected_pattern("form_error")
        self.wait(text_matches(self.courses, "error", pattern))
        if self.course:
            self.courses.reload()
            check_equal(f"'{self.course}' availability unchanged", self.initial, self.courses.is_available(self.course))

    def observed_error(self) -> str | None:
        return self.courses.peek_text("error") if self.courses.has_error() else None


class CourseFilterScenario(Scenario):
    """Filter the course listing by term, year, or department."""

    name = "course_filter"

    def setup(self) -> None:
        admin_login(self.session)
        self.courses = self.session.pages(CourseManagementPage)
        self.courses.navigate()

    def act(self) -> None:
        self.courses.filter_by(self.record["category_type"], self.record["category"])

    def verify_success(self) -> None:
        column = self.record.get("column", self.record["category_type"])
        names = self.wait(
            EventualCondition("filtered course listing", lambda: self.courses.count("name_cells") and self.courses.course_names())
        )
        check_all(f"{column} of every listed course", self.record["category"], self.courses.course_categories(column))
        for course in self.record.get("expected_courses", ()):
            check_contains("filtered listing", course, names)

    def verify_failure(self) -> None:
        # A category with no courses settles to an empty listing.
        self.wait(EventualCondition("empty course listing", lambda: self.courses.count("rows") == 0))
        check_equal("courses listed for empty category", [], self.courses.course_names())
