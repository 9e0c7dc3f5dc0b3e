from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from hrms.core.enums import Role
from hrms.core.exceptions import AuthenticationError, ValidationError
from hrms.users.controller import landing_endpoint
from hrms.users.model import User
from hrms.users.service import AuthService

from conftest import HR_ID, InMemoryEmployees, InMemoryUsers


@pytest.fixture
def auth(users, employees):
    return AuthService(InMemoryUsers(users), InMemoryEmployees(employees))


def test_login_by_username_uses_employee_name(auth):
    s_user = auth.authenticate("hr", "hr123456")
    assert s_user.user_id == HR_ID
    assert s_user.role == Role.HR
    assert s_user.display_name == "Helena Reyes"


def test_login_by_email(auth):
    assert auth.authenticate("employee@example.com", "employee123").role == Role.EMPLOYEE


@pytest.mark.parametrize("login_key, password", [("hr", "wrong"), ("ghost", "hr123456")])
def test_bad_credentials(auth, login_key, password):
    with pytest.raises(AuthenticationError):
        auth.authenticate(login_key, password)


def test_blank_username(auth):
    with pytest.raises(ValidationError):
        auth.authenticate("  ", "hr123456")


def test_placeholder_hash_never_matches():
    users = {9: User(9, "legacy", "legacy@example.com", "CHANGE_ME", Role.EMPLOYEE)}
    with pytest.raises(AuthenticationError):
        AuthService(InMemoryUsers(users)).authenticate("legacy", "CHANGE_ME")


def test_admin_accounts_log_in_to_self_service():
    users = {5: User(5, "root", "root@example.com", generate_password_hash("s3cret!"), Role.ADMIN)}
    s_user = AuthService(InMemoryUsers(users)).authenticate("root", "s3cret!")

    assert s_user.role == Role.ADMIN
    assert s_user.display_name == "root"
    assert landing_endpoint(s_user.role.value) == "timesheet"
