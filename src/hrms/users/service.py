from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .repository import EmployeeRepository, UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    username: str
    display_name: str
    role: Role


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository, employees: Optional[EmployeeRepository] = None):
        self._users = users
        self._employees = employees

    def authenticate(self, login_key: str, password: str) -> SessionUser:
        login_key = require_non_empty(login_key, "Username")
        user = self._users.get_by_login(login_key)
        if not user or not user.is_active:
            logger.info("Login failed for %r: unknown or inactive account", login_key)
            raise AuthenticationError("Invalid username or password.")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.info("Login failed for %r: wrong password", login_key)
            raise AuthenticationError("Invalid username or password.")

        display_name = user.username
        if self._employees is not None:
            employee = self._employees.get_by_id(user.user_id)
            if employee and employee.full_name:
                display_name = employee.full_name

        logger.info("User %s logged in as %s", user.user_id, user.role.value)
        return SessionUser(
            user_id=user.user_id,
            username=user.username,
            display_name=display_name,
            role=user.role,
        )
