"""In-memory admin application standing in for the browser.

Scenarios talk to page objects only, so the integration layer swaps each
Playwright-backed page object for a fake with the same public surface,
backed by ``FakeAdminApp``.  Every scenario runs its full Setup, Act,
Verify and Teardown against it, including the secondary-context login and
the notification mailbox.
"""

from __future__ import annotations

import itertools
import re
from typing import Any

import pytest

from ui_scenarios.action_log import ActionLog
from ui_scenarios.errors import ElementNotFound
from ui_scenarios.mailbox import Message
from ui_scenarios.pages import (
    CourseManagementPage,
    DashboardPage,
    LoginPage,
    RegistrationPage,
    UserFormPage,
    UserManagementPage,
)
from ui_scenarios.pages.registration_page import REGISTRATION_FIELDS
from ui_scenarios.pages.user_form_page import FORM_FIELDS
from ui_scenarios.runner import ScenarioRunner, ScenarioSession

ROLES = ("Admin", "Editor", "Viewer")
ACCESS_LEVELS = ("Full", "Limited", "Read-only")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PUBLIC_PATHS = ("/login", "/register")

COURSES = (
    {"name": "Biology 101", "term": "Fall 2024", "year": "2024", "department": "Science", "available": True},
    {"name": "Chemistry 201", "term": "Fall 2024", "year": "2024", "department": "Science", "available": False},
    {"name": "History 110", "term": "Spring 2025", "year": "2025", "department": "Humanities", "available": True},
    {"name": "Literature 210", "term": "Spring 2025", "year": "2025", "department": "Humanities", "available": False},
    {
        "name": "Physics 301 (Archived)",
        "term": "Fall 2023",
        "year": "2023",
        "department": "Engineering",
        "available": False,
        "archived": True,
    },
)


class InMemoryMailbox:
    """Mailbox collaborator that the fake app delivers into."""

    def __init__(self) -> None:
        self.messages: list[Message] = []

    def deliver(self, message: Message) -> None:
        self.messages.append(message)

    def fetch_latest(self, recipient: str, subject_contains: str) -> Message | None:
        for message in reversed(self.messages):
            if recipient in message.recipients and subject_contains.lower() in message.subject.lower():
                return message
        return None


class FakeAdminApp:
    """Server-side state shared by every browser tab."""

    def __init__(self, admin_username: str, admin_password: str, mailbox: InMemoryMailbox) -> None:
        self.admins = {admin_username: admin_password}
        self.users: dict[str, dict[str, Any]] = {}
        self.courses = [dict(course) for course in COURSES]
        self.mailbox = mailbox
        self.send_notifications = True
        self.delete_enabled = True
        self._ids = itertools.count(1)

    # Authentication ------------------------------------------------------

    def authenticate(self, username: str, password: str) -> bool:
        if self.admins.get(username) == password:
            return True
        user = self.users.get(username)
        return user is not None and user.get("password") == password

    # Users -----------------------------------------------------------------

    def validate_user(self, form: dict[str, str], editing: str | None) -> dict[str, str]:
        errors: dict[str, str] = {}
        name = form.get("name") or " ".join(filter(None, (form.get("first_name"), form.get("last_name"))))
        if not name.strip():
            errors["name"] = "Name is required"
        email = form.get("email", "")
        if not email:
            errors["email"] = "Email is required"
        elif not EMAIL_RE.match(email):
            errors["email"] = "Invalid email format"
        elif email in self.users and email != editing:
            errors["email"] = "Email already exists"
        if form.get("role") and form["role"] not in ROLES:
            errors["role"] = "Invalid role"
        if form.get("access_level") and form["access_level"] not in ACCESS_LEVELS:
            errors["access_level"] = "Invalid access level"
        return errors

    def save_user(self, form: dict[str, str], editing: str | None) -> str:
        name = form.get("name") or " ".join(filter(None, (form.get("first_name"), form.get("last_name"))))
        if editing is not None:
            user = self.users.pop(editing)
            user.update(form, name=name)
            self.users[user["email"]] = user
            return f"User {name} updated successfully"

        user = {"role": "Viewer", "access_level": "Limited", "password": "Welcome1!", **form, "name": name}
        self.users[user["email"]] = user
        if self.send_notifications:
            self.mailbox.deliver(
                Message(
                    id=str(next(self._ids)),
                    subject="Account Created",
                    sender="noreply@admin.example.com",
                    recipients=(user["email"],),
                    text=f"Welcome {name}, your account has been created with the {user['role']} role.",
                )
            )
        return f"User {name} created successfully"

    def delete_user(self, email: str) -> None:
        if self.delete_enabled:
            self.users.pop(email, None)

    # Courses ---------------------------------------------------------------

    def course(self, name: str) -> dict[str, Any] | None:
        return next((course for course in self.courses if course["name"] == name), None)


class Tab:
    """One browser page: location, session cookie, and transient UI state."""

    def __init__(self, app: FakeAdminApp) -> None:
        self.app = app
        self.path = "/"
        self.user: str | None = None
        self.flash: dict[str, str] = {}
        self.field_errors: dict[str, str] = {}
        self.form: dict[str, str] = {}
        self.editing: str | None = None
        self.search = ""
        self.filters: dict[str, str] = {}
        self.selected: list[str] = []

    def goto(self, path: str) -> None:
        if path not in PUBLIC_PATHS and self.user is None:
            path = "/login"
        self.path = path
        self.flash = {}
        self.field_errors = {}
        self.filters = {}
        self.selected = []
        self.search = ""


class FakeContext:
    def __init__(self, app: FakeAdminApp) -> None:
        self.app = app
        self.closed = False

    def new_page(self) -> Tab:
        return Tab(self.app)

    def close(self) -> None:
        self.closed = True


class FakeBrowser:
    def __init__(self, app: FakeAdminApp) -> None:
        self.app = app
        self.contexts: list[FakeContext] = []

    def new_context(self) -> FakeContext:
        context = FakeContext(self.app)
        self.contexts.append(context)
        return context


# ----------------------------------------------------------------------
# Fake page objects
# ----------------------------------------------------------------------


class FakePage:
    path = "/"

    def __init__(self, tab: Tab, log: ActionLog) -> None:
        self.tab = tab
        self.app = tab.app
        self.log = log

    def _record(self, step: str, **params: Any) -> None:
        self.log.record(step, params, page=type(self).__name__)

    def navigate(self) -> None:
        self._record("navigate", path=self.path)
        self.tab.goto(self.path)

    def reload(self) -> None:
        self._record("reload")
        self.tab.goto(self.tab.path)

    def wait_for_load(self, state: str = "networkidle") -> None:
        pass

    def is_at(self) -> bool:
        return self.tab.path == self.path

    def peek_text(self, name: str) -> str:
        return self.tab.flash.get(name, "")

    def is_visible(self, name: str) -> bool:
        return bool(self.peek_text(name))


class FakeLoginPage(FakePage):
    path = "/login"

    def login(self, username: str, password: str) -> None:
        self.log.record("fill", {"username": username, "password": password}, page=type(self).__name__)
        self._record("click", element="submit")
        if self.app.authenticate(username, password):
            self.tab.user = username
            self.tab.goto("/dashboard")
        else:
            self.tab.flash = {"error": "Invalid credentials"}

    def has_error(self) -> bool:
        return self.is_visible("error")

    def is_displayed(self) -> bool:
        return self.is_at()


class FakeDashboardPage(FakePage):
    path = "/dashboard"

    def is_visible(self, name: str) -> bool:
        if name == "content":
            return self.is_at() and self.tab.user is not None
        return super().is_visible(name)

    def is_access_denied(self) -> bool:
        return self.is_visible("access_denied")


class FakeUserManagementPage(FakePage):
    path = "/admin/users"

    def _listed(self) -> list[dict[str, Any]]:
        term = self.tab.search.lower()
        return [
            user
            for user in self.app.users.values()
            if not term or term in user["email"].lower() or term in user["name"].lower()
        ]

    def _find(self, key: str, action: str) -> dict[str, Any]:
        for user in self._listed():
            if key in (user["email"], user["name"]):
                return user
        raise ElementNotFound(action, f"row '{key}'")

    def row(self, key: str) -> str:
        return key

    def count(self, target: str) -> int:
        if target == "rows":
            return len(self._listed())
        return sum(1 for user in self._listed() if target in (user["email"], user["name"]))

    def search(self, term: str) -> None:
        self._record("fill", search=term)
        self.tab.search = term

    def open_add_user(self) -> None:
        self._record("click", element="add_user")
        self.tab.goto("/admin/users/new")
        self.tab.form = {}
        self.tab.editing = None

    def open_edit_user(self, key: str) -> None:
        user = self._find(key, "edit")
        self._record("click", element=f"edit {key}")
        self.tab.goto(f"/admin/users/{user['email']}/edit")
        self.tab.form = {field: user[field] for field, _ in FORM_FIELDS if field in user}
        self.tab.editing = user["email"]

    def delete_user(self, key: str, *, confirm: bool = True) -> None:
        user = self._find(key, "delete")
        self._record("click", element=f"delete {key}")
        self._record("click", element="confirm_delete" if confirm else "cancel_delete")
        if confirm:
            self.app.delete_user(user["email"])
            self.tab.flash = {"success": "User deleted successfully"}

    def row_text(self, key: str) -> str:
        user = self._find(key, "row")
        return " ".join(str(user.get(field, "")) for field in ("name", "email", "role", "access_level"))

    def has_user(self, key: str) -> bool:
        return self.count(self.row(key)) > 0

    def row_count(self) -> int:
        return self.count("rows")

    def has_success(self) -> bool:
        return self.is_visible("success")

    def has_error(self) -> bool:
        return self.is_visible("error")


class FakeUserFormPage(FakePage):
    path = "/admin/users/new"

    def fill_form(self, inputs: dict[str, Any]) -> list[str]:
        filled = []
        for field, _ in FORM_FIELDS:
            if inputs.get(field) is not None:
                self.tab.form[field] = str(inputs[field])
                filled.append(field)
        self.log.record("fill", {field: self.tab.form[field] for field in filled}, page=type(self).__name__)
        return filled

    def submit(self) -> None:
        self._record("click", element="submit")
        errors = self.app.validate_user(self.tab.form, self.tab.editing)
        if errors:
            self.tab.field_errors = errors
            return
        message = self.app.save_user(self.tab.form, self.tab.editing)
        self.tab.goto("/admin/users")
        self.tab.flash = {"success": message}
        self.tab.form = {}
        self.tab.editing = None

    def field_error(self, field: str) -> str:
        return self.tab.field_errors[field]

    def has_field_error(self, field: str) -> bool:
        return field in self.tab.field_errors

    def has_form_error(self) -> bool:
        return self.is_visible("form_error")

    def visible_field_errors(self) -> list[str]:
        return [field for field, _ in FORM_FIELDS if self.has_field_error(field)]


class FakeRegistrationPage(FakePage):
    path = "/register"

    def register(self, inputs: dict[str, Any]) -> None:
        values = {field: str(inputs[field]) for field in REGISTRATION_FIELDS if inputs.get(field) is not None}
        self.log.record("fill", values, page=type(self).__name__)
        self._record("click", element="submit")
        errors: dict[str, str] = {}
        email = values.get("email", "")
        if not EMAIL_RE.match(email):
            errors["email"] = "Invalid email format"
        if len(values.get("password", "")) < 8:
            errors["password"] = "Password must be at least 8 characters"
        if values.get("confirm_password") is not None and values.get("confirm_password") != values.get("password"):
            errors["confirm_password"] = "Passwords do not match"
        if errors:
            self.tab.field_errors = errors
            return
        if inputs.get("accept_terms") is False:
            self.tab.flash = {"form_error": "Registration failed: you must accept the terms"}
            return
        if email in self.app.users:
            self.tab.flash = {"form_error": "An account with this email already exists"}
            return
        name = " ".join(filter(None, (values.get("first_name"), values.get("last_name")))) or email
        self.app.users[email] = {"name": name, "email": email, "role": "Viewer", "password": values["password"]}
        self.tab.flash = {"success": f"Registration successful. Welcome, {name}!"}

    def field_error(self, field: str) -> str:
        return self.tab.field_errors[field]

    def has_field_error(self, field: str) -> bool:
        return field in self.tab.field_errors

    def has_success(self) -> bool:
        return self.is_visible("success")

    def has_form_error(self) -> bool:
        return self.is_visible("form_error")


class FakeCourseManagementPage(FakePage):
    path = "/admin/courses"

    def _listed(self) -> list[dict[str, Any]]:
        return [
            course
            for course in self.app.courses
            if all(str(course.get(key)) == value for key, value in self.tab.filters.items())
        ]

    def _listed_course(self, name: str) -> dict[str, Any]:
        for course in self._listed():
            if course["name"] == name:
                return course
        raise ElementNotFound("availability", f"course row '{name}'")

    def count(self, target: str) -> int:
        return len(self._listed())

    def filter_by(self, category_type: str, value: str) -> None:
        if category_type not in ("term", "year", "department"):
            raise ElementNotFound(f"{category_type} filter")
        self._record("select", element=f"{category_type} filter", option=value)
        self.tab.filters[category_type] = value

    def course_names(self) -> list[str]:
        return [course["name"] for course in self._listed()]

    def course_categories(self, column: str) -> list[str]:
        return [str(course[column]) for course in self._listed()]

    def has_course(self, name: str) -> bool:
        return any(course["name"] == name for course in self._listed())

    def is_available(self, name: str) -> bool:
        return bool(self._listed_course(name)["available"])

    def set_available(self, name: str, available: bool) -> None:
        course = self._listed_course(name)
        self._record("set_checked", element=f"availability {name}", checked=available)
        if course.get("archived"):
            self.tab.flash = {"error": "Unable to update an archived course"}
            return
        course["available"] = available
        self.tab.flash = {"success": "Course availability updated successfully"}

    def select_all(self) -> None:
        self._record("set_checked", element="select_all", checked=True)
        self.tab.selected = self.course_names()

    def apply_bulk_action(self, label: str, *, confirm: bool = True) -> None:
        targets = {"Make Available": True, "Make Unavailable": False}
        if label not in targets:
            raise ElementNotFound(f"option '{label}'", "bulk_action")
        self._record("select", element="bulk_action", option=label)
        if not confirm:
            return
        if not self.tab.selected:
            self.tab.flash = {"error": "No courses selected: unable to apply"}
            return
        updated = 0
        for name in self.tab.selected:
            course = self.app.course(name)
            if course is not None and not course.get("archived"):
                course["available"] = targets[label]
                updated += 1
        self.tab.flash = {"success": f"{updated} courses updated successfully"}

    def has_error(self) -> bool:
        return self.is_visible("error")


FAKE_PAGES = {
    LoginPage: FakeLoginPage,
    DashboardPage: FakeDashboardPage,
    UserManagementPage: FakeUserManagementPage,
    UserFormPage: FakeUserFormPage,
    RegistrationPage: FakeRegistrationPage,
    CourseManagementPage: FakeCourseManagementPage,
}


class FakeSession(ScenarioSession):
    """Session whose page objects are backed by the in-memory app."""

    def pages(self, page_cls, page=None):
        return FAKE_PAGES[page_cls](page if page is not None else self.page, self.log)


# ----------------------------------------------------------------------
# Fixtures
# ----------------------------------------------------------------------


@pytest.fixture()
def mail_store() -> InMemoryMailbox:
    return InMemoryMailbox()


@pytest.fixture()
def admin_app(fast_config, mail_store) -> FakeAdminApp:
    return FakeAdminApp(fast_config.admin_username, fast_config.admin_password, mail_store)


@pytest.fixture()
def fake_browser(admin_app) -> FakeBrowser:
    return FakeBrowser(admin_app)


@pytest.fixture()
def fake_session(admin_app, fake_browser, fast_config, mail_store) -> FakeSession:
    session = FakeSession(
        Tab(admin_app),
        fast_config,
        log=ActionLog(),
        browser=fake_browser,
        mailbox=mail_store,
    )
    yield session
    session.close()


@pytest.fixture()
def runner(fake_session) -> ScenarioRunner:
    return ScenarioRunner(fake_session)


@pytest.fixture()
def make_session(admin_app, fake_browser, mail_store):
    """Build extra sessions against the same app, e.g. with a different config."""

    def factory(config, **kwargs) -> FakeSession:
        return FakeSession(Tab(admin_app), config, log=ActionLog(), browser=fake_browser, mailbox=mail_store, **kwargs)

    return factory
