"""Concrete admin-application scenarios."""

from .auth import LoginScenario, RegistrationScenario
from .courses import CourseAvailabilityScenario, CourseFilterScenario
from .users import AccountNotificationScenario, AddUserScenario, DeleteUserScenario, EditUserScenario

__all__ = [
    "AccountNotificationScenario",
    "AddUserScenario",
    "CourseAvailabilityScenario",
    "CourseFilterScenario",
    "DeleteUserScenario",
    "EditUserScenario",
    "LoginScenario",
    "RegistrationScenario",
]
