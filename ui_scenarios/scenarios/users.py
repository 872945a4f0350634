"""User management scenarios: add, edit, delete, and account notification."""

from __future__ import annotations

from typing import Any, Mapping

from ..checks import check_contains, check_equal, check_false, check_matches, check_true
from ..mailbox import assert_no_message, wait_for_message
from ..pages import DashboardPage, LoginPage, UserFormPage, UserManagementPage
from ..polling import EventualCondition, text_matches
from ..runner import Scenario
from .common import admin_login, ensure_user, feedback, open_user_listing


def _isolated(session, user: Mapping[str, Any]) -> dict[str, Any]:
    data = dict(user)
    if data.get("email"):
        data["email"] = session.address(data["email"])
    return data


class _UserFormScenario(Scenario):
    """Shared verification for scenarios that submit the user form."""

    def form(self) -> UserFormPage:
        return self.session.pages(UserFormPage)

    def listing_page(self) -> UserManagementPage:
        return self.session.pages(UserManagementPage)

    def expect_success_banner(self) -> str:
        banner = self.wait(text_matches(self.listing_page(), "success", self.expected_pattern("success")))
        check_false("form error shown after successful submit", self.form().has_form_error())
        return banner

    def expect_form_rejection(self) -> str:
        """Wait for the field-level (or form-level) error the record expects."""
        form = self.form()
        field = self.record.expected.error_field
        if field:
            pattern = self.expected_pattern("field_error")
            condition = EventualCondition(
                f"field error for '{field}'",
                lambda: form.has_field_error(field),
                timeout=self.config.feedback_timeout,
                interval=self.config.poll_interval,
            )
            self.wait(condition)
            text = form.field_error(field)
        else:
            pattern = self.expected_pattern("form_error")
            text = self.wait(text_matches(form, "form_error", pattern))
        check_matches(f"error message for {field or 'form'}", pattern, text)
        check_false("success banner shown for rejected submit", self.listing_page().has_success())
        return text

    def observed_error(self) -> str | None:
        form = self.form()
        if form.has_form_error():
            return form.peek_text("form_error")
        fields = form.visible_field_errors()
        return f"field errors: {fields}" if fields else None


class AddUserScenario(_UserFormScenario):
    """Admin creates a user with name, email, role, and access level.

    ``inputs.preexisting`` (a user mapping) is created during Setup so that
    duplicate-email records never depend on another scenario.
    """

    name = "add_user"

    def setup(self) -> None:
        self.user = _isolated(self.session, {k: v for k, v in self.record.inputs.items() if k != "preexisting"})
        self.key = self.user.get("email") or self.user.get("name") or ""
        admin_login(self.session)
        preexisting = self.record.get("preexisting")
        if preexisting:
            ensure_user(self.session, _isolated(self.session, preexisting))
        users = open_user_listing(self.session, self.key or None)
        self.baseline = users.count(users.row(self.key)) if self.key else users.row_count()
        if self.record.expected.success and self.key:
            check_equal(f"precondition: {self.key} not yet listed", 0, self.baseline)

    def act(self) -> None:
        self.listing_page().open_add_user()
        form = self.form()
        form.fill_form(self.user)
        form.submit()

    def verify_success(self) -> None:
        banner = self.expect_success_banner()
        if self.user.get("name"):
            check_contains("success banner names the user", self.user["name"], banner)
        users = open_user_listing(self.session, self.key)
        feedback(
            self.session,
            EventualCondition(f"listing row for {self.key}", lambda: users.has_user(self.key)),
        )

    def verify_failure(self) -> None:
        self.expect_form_rejection()
        users = open_user_listing(self.session, self.key or None)
        observed = users.count(users.row(self.key)) if self.key else users.row_count()
        check_equal("listing rows unchanged after rejected submit", self.baseline, observed)


class EditUserScenario(_UserFormScenario):
    """Admin edits an existing user's name, role, or access level.

    ``inputs.user`` is created in Setup; ``inputs.changes`` is applied.
    Verification reads the listing, the only source of persisted state.
    """

    name = "edit_user"

    def setup(self) -> None:
        self.user = _isolated(self.session, self.record["user"])
        self.changes = dict(self.record["changes"])
        self.key = self.user["email"]
        admin_login(self.session)
        ensure_user(self.session, self.user)

    def act(self) -> None:
        users = open_user_listing(self.session, self.key)
        users.open_edit_user(self.key)
        form = self.form()
        form.fill_form(self.changes)
        form.submit()

    def _listed_row(self) -> str:
        users = open_user_listing(self.session, self.key)
        return users.row_text(self.key)

    def verify_success(self) -> None:
        self.expect_success_banner()
        expected_states = dict(self.record.expected.field_states) or self.changes
        row = self._listed_row()
        for field, value in expected_states.items():
            check_contains(f"listing shows updated {field}", str(value), row)

    def verify_failure(self) -> None:
        self.expect_form_rejection()
        row = self._listed_row()
        for field in self.changes:
            if self.user.get(field):
                check_contains(f"listing keeps original {field}", str(self.user[field]), row)


class DeleteUserScenario(Scenario):
    """Admin deletes a user; the deleted user can no longer sign in.

    Inputs: ``user`` (email, password, name), ``exists`` (create it first,
    default true), ``cancel`` (dismiss the confirmation dialog).
    """

    name = "delete_user"

    def setup(self) -> None:
        self.user = _isolated(self.session, self.record["user"])
        self.key = self.user["email"]
        self.should_exist = bool(self.record.get("exists", True))
        self.delete_issued = False
        admin_login(self.session)
        if self.should_exist:
            ensure_user(self.session, self.user)
        users = open_user_listing(self.session, self.key)
        self.present = users.has_user(self.key)
        check_equal(f"precondition: {self.key} listed", self.should_exist, self.present)

    def act(self) -> None:
        if not self.present:
            self.log.record("skip_delete", {"user": self.key, "reason": "not listed"})
            return
        users = self.session.pages(UserManagementPage)
        users.delete_user(self.key, confirm=not self.record.get("cancel", False))
        self.delete_issued = True

    def verify_success(self) -> None:
        users = self.session.pages(UserManagementPage)
        feedback(
            self.session,
            EventualCondition(f"{self.key} removed from listing", lambda: not users.has_user(self.key)),
        )
        self._expect_login_denied()

    def _expect_login_denied(self) -> None:
        if not self.user.get("password"):
            return
        page = self.session.open_secondary(f"deleted user {self.key}")
        login = self.session.pages(LoginPage, page)
        login.navigate()
        login.login(self.key, self.user["password"])
        login.wait_for_load()
        dashboard = self.session.pages(DashboardPage, page)
        dashboard.navigate()
        feedback(
            self.session,
            EventualCondition(
                f"{self.key} bounced to login or denied access",
                lambda: "login" if login.is_displayed() else ("access denied" if dashboard.is_access_denied() else None),
            ),
        )

    def verify_failure(self) -> None:
        users = self.session.pages(UserManagementPage)
        check_false("error banner shown for skipped/cancelled delete", users.has_error())
        if self.present:
            check_true(f"{self.key} still listed", users.has_user(self.key))
        else:
            check_false("delete issued for absent user", self.delete_issued)

    def observed_error(self) -> str | None:
        users = self.session.pages(UserManagementPage)
        return users.peek_text("error") if users.has_error() else None


class AccountNotificationScenario(AddUserScenario):
    """Creating an account sends a notification email to the new user.

    Inputs add ``subject`` (default "Account Created") and ``body_contains``.
    """

    name = "account_notification"

    def setup(self) -> None:
        if self.session.mailbox is None:
            raise RuntimeError("AccountNotificationScenario requires a mailbox")
        super().setup()
        self.user.pop("subject", None)
        self.user.pop("body_contains", None)

    def verify_success(self) -> None:
        super().verify_success()
        email = self.user["email"]
        message = wait_for_message(
            self.session.mailbox,
            email,
            self.record.get("subject", "Account Created"),
            timeout=self.config.mail_timeout,
            interval=self.config.mail_poll_interval,
        )
        check_contains("notification recipients", email, message.recipients)
        if self.user.get("name"):
            check_contains("notification body names the user", self.user["name"], message.body)
        for fragment in self.record.get("body_contains", ()):
            check_contains("notification body", fragment, message.body)

    def verify_failure(self) -> None:
        super().verify_failure()
        email = self.user.get("email")
        if email:
            assert_no_message(
                self.session.mailbox,
                email,
                self.record.get("subject", "Account Created"),
                window=min(15.0, self.config.mail_timeout),
                interval=self.config.mail_poll_interval,
            )
