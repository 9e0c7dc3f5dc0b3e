from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee, User
from .repository import EmployeeRepository, UserRepository


def _to_user(r: dict) -> User:
    return User(
        user_id=int(r["id"]),
        username=r["username"],
        email=r.get("email"),
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        is_active=bool(r.get("is_active", 1)),
    )


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["id"]),
        first_name=r["first_name"],
        last_name=r["last_name"],
        department=r.get("department"),
        position=r.get("position"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_login(self, login_key: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, username, email, password_hash, role, is_active
                FROM users
                WHERE username=%s OR email=%s
                LIMIT 1
                """,
                (login_key, login_key),
            )
            r = fetchone(cur)
            return _to_user(r) if r else None


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, first_name, last_name, department, position
                FROM employees
                WHERE id=%s
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, first_name, last_name, department, position
                FROM employees
                ORDER BY last_name, first_name
                """
            )
            return [_to_employee(r) for r in fetchall(cur)]
