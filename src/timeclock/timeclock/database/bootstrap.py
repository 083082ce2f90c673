from __future__ import annotations

import logging
import re
from decimal import Decimal
from pathlib import Path
from typing import Iterable

from .connection import DatabaseConnection, DBConfig
from .mysql_base import db_cursor, fetchone

logger = logging.getLogger(__name__)

# (pin, name, hourly wage, role)
DEMO_EMPLOYEES = (
    ("1234", "Admin Demo", Decimal("0"), "admin"),
    ("1111", "Kim Minji", Decimal("15000"), "employee"),
    ("2222", "Lee Jun", Decimal("18000"), "manager"),
)


def _factory(db_config: dict) -> DatabaseConnection:
    # Bootstrap may run before any container exists, so it never touches the shared instance.
    return DatabaseConnection(DBConfig.from_dict(db_config))


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
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
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    factory = _factory(db_config)
    database = factory.config.database
    with db_cursor(factory, dictionary=False, with_database=False) as (_, cur):
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    factory = _factory(db_config)
    with db_cursor(factory, dictionary=False) as (_, cur):
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
    logger.info("schema applied to %s", factory.config.database)


def ensure_demo_employees(db_config: dict) -> None:
    """Insert the demo PINs unless they already exist. Never touches ledger rows."""

    with db_cursor(_factory(db_config)) as (_, cur):
        for pin, name, wage, role in DEMO_EMPLOYEES:
            cur.execute("SELECT employee_id FROM employees WHERE employee_id=%s", (pin,))
            if fetchone(cur):
                continue
            cur.execute(
                """
                INSERT INTO employees (employee_id, name, hourly_wage, role, active)
                VALUES (%s, %s, %s, %s, 1)
                """,
                (pin, name, wage, role),
            )
            logger.info("seeded demo employee pin=%s role=%s", pin, role)


def list_tables(db_config: dict) -> list[str]:
    with db_cursor(_factory(db_config), dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
