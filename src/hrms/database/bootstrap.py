from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


@dataclass(frozen=True)
class DemoAccount:
    employee_id: int
    first_name: str
    last_name: str
    department: str
    position: str
    username: str
    email: str
    password: str
    role: str


DEMO_ACCOUNTS = (
    DemoAccount(1, "Helena", "Reyes", "Human Resources", "HR Officer", "hr", "hr@example.com", "hr123456", "hr"),
    DemoAccount(2, "Marco", "Santos", "Engineering", "Developer", "employee", "employee@example.com", "employee123", "employee"),
)


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "hrms")),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes, skips '--' comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    in_comment = False
    escape = False
    prev = ""

    for ch in sql:
        if in_comment:
            if ch == "\n":
                in_comment = False
                buf.append(ch)
            prev = ch
            continue

        if escape:
            buf.append(ch)
            escape = False
            prev = ch
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            prev = ch
            continue

        if ch == "-" and prev == "-" and not in_single and not in_double:
            buf.pop()
            in_comment = True
            prev = ch
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            prev = ch
            continue

        buf.append(ch)
        prev = ch

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql(cur, sql: str) -> None:
    for stmt in _iter_sql_statements(sql):
        cur.execute(stmt)


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    target = _as_target(db_config)
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        _exec_sql(cur, sql)
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied %s to %s", schema_path, target.database)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    target = _as_target(db_config)
    sql = _strip_create_db_and_use(Path(seed_path).read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        _exec_sql(cur, sql)
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied %s to %s", seed_path, target.database)


def ensure_demo_users(db_config: dict, accounts: Iterable[DemoAccount] = DEMO_ACCOUNTS) -> None:
    """Upsert login accounts with real password hashes (seed.sql cannot hash)."""
    target = _as_target(db_config)

    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)
        for acc in accounts:
            cur.execute(
                """
                INSERT INTO employees (id, first_name, last_name, department, position)
                VALUES (%s, %s, %s, %s, %s) AS new
                ON DUPLICATE KEY UPDATE
                    first_name=new.first_name, last_name=new.last_name,
                    department=new.department, position=new.position
                """,
                (acc.employee_id, acc.first_name, acc.last_name, acc.department, acc.position),
            )
            cur.execute(
                """
                INSERT INTO users (id, username, email, password_hash, role, is_active)
                VALUES (%s, %s, %s, %s, %s, 1) AS new
                ON DUPLICATE KEY UPDATE
                    username=new.username, email=new.email,
                    password_hash=new.password_hash, role=new.role, is_active=1
                """,
                (acc.employee_id, acc.username, acc.email, generate_password_hash(acc.password), acc.role),
            )
        conn.commit()
    finally:
        conn.close()
    logger.info("Demo accounts ready in %s", target.database)


def list_tables(db_config: dict) -> list[str]:
    target = _as_target(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
