"""Login and self-registration scenarios."""

from __future__ import annotations

from ..checks import check_false, check_matches
from ..pages import DashboardPage, LoginPage, RegistrationPage
from ..polling import EventualCondition, element_visible, text_matches
from ..runner import Scenario


class LoginScenario(Scenario):
    """Sign in with one credential set; valid sets reach the dashboard."""

    name = "login"

    def setup(self) -> None:
        self.login_page = self.session.pages(LoginPage)
        self.dashboard = self.session.pages(DashboardPage)
        self.login_page.navigate()

    def act(self) -> None:
        self.login_page.login(self.record.get("username", ""), self.record.get("password", ""))

    def verify_success(self) -> None:
        self.wait(element_visible(self.dashboard, "content"))
        check_false("login error shown after valid login", self.login_page.has_error())

    def verify_failure(self) -> None:
        pattern = self.expected_pattern("access_denied")
        text = self.wait(text_matches(self.login_page, "error", pattern))
        check_matches("login error message", pattern, text)
        check_false("dashboard reachable after rejected login", self.dashboard.is_at())

    def observed_error(self) -> str | None:
        return self.login_page.peek_text("error") if self.login_page.has_error() else None


class RegistrationScenario(Scenario):
    """A visitor registers an account through the public sign-up form."""

    name = "registration"

    def setup(self) -> None:
        self.form = self.session.pages(RegistrationPage)
        self.inputs = dict(self.record.inputs)
        if self.inputs.get("email"):
            self.inputs["email"] = self.session.address(self.inputs["email"])
        self.form.navigate()

    def act(self) -> None:
        self.form.register(self.inputs)

    def verify_success(self) -> None:
        pattern = self.expected_pattern("success")
        text = self.wait(text_matches(self.form, "success", pattern))
        check_matches("registration confirmation", pattern, text)
        check_false("form error shown after valid registration", self.form.has_form_error())

    def verify_failure(self) -> None:
        field = self.record.expected.error_field
        if field:
            pattern = self.expected_pattern("field_error")
            self.wait(EventualCondition(f"field error for '{field}'", lambda: self.form.has_field_error(field)))
            check_matches(f"error message for {field}", pattern, self.form.field_error(field))
        else:
            pattern = self.expected_pattern("form_error")
            self.wait(text_matches(self.form, "form_error", pattern))
        check_false("registration confirmed for invalid input", self.form.has_success())

    def observed_error(self) -> str | None:
        return self.form.peek_text("form_error") if self.form.has_form_error() else None
