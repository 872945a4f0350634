"""Page Object Model classes for the admin application."""

from .base_page import BasePage
from .courses_page import CourseManagementPage
from .dashboard_page import DashboardPage
from .login_page import LoginPage
from .registration_page import RegistrationPage
from .user_form_page import UserFormPage
from .users_page import UserManagementPage

__all__ = [
    "BasePage",
    "CourseManagementPage",
    "DashboardPage",
    "LoginPage",
    "RegistrationPage",
    "UserFormPage",
    "UserManagementPage",
]
