from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: login account.

    Note: Plain data object, no database access here.
    """

    user_id: int
    username: str
    email: Optional[str]
    password_hash: str
    role: Role
    is_active: bool = True


@dataclass(frozen=True)
class Employee:
    employee_id: int
    first_name: str
    last_name: str
    department: Optional[str] = None
    position: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
