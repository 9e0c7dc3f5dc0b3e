from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee, User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_login(self, login_key: str) -> Optional[User]:
        """Look up by username or email."""

        raise NotImplementedError


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError
