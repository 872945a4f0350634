"""Precondition steps shared by admin scenarios."""

from __future__ import annotations

from typing import Any, Mapping

from ..checks import check_true
from ..pages import DashboardPage, LoginPage, UserFormPage, UserManagementPage
from ..polling import EventualCondition, element_visible, wait_for
from ..runner import ScenarioSession


def feedback(session: ScenarioSession, condition: EventualCondition) -> Any:
    return wait_for(condition, timeout=session.config.feedback_timeout, interval=session.config.poll_interval)


def admin_login(session: ScenarioSession) -> DashboardPage:
    """Sign in with the configured admin account and wait for the dashboard."""
    login = session.pages(LoginPage)
    login.navigate()
    login.login(session.config.admin_username, session.config.admin_password)
    dashboard = session.pages(DashboardPage)
    feedback(session, element_visible(dashboard, "content"))
    return dashboard


def open_user_listing(session: ScenarioSession, key: str | None = None) -> UserManagementPage:
    users = session.pages(UserManagementPage)
    users.navigate()
    if key:
        users.search(key)
    users.wait_for_load()
    return users


def ensure_user(session: ScenarioSession, user: Mapping[str, Any]) -> UserManagementPage:
    """Create *user* through the UI unless the listing already shows it.

    Each scenario creates the records it depends on instead of relying on
    another scenario's side effects.
    """
    email = user["email"]
    users = open_user_listing(session, email)
    if users.has_user(email):
        return users

    users.open_add_user()
    form = session.pages(UserFormPage)
    form.fill_form(user)
    form.submit()

    users = open_user_listing(session, email)
    check_true(f"precondition: user {email} exists", users.has_user(email))
    return users
