from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector

from ..core.enums import Role
from .connection import DBConfig

logger = logging.getLogger(__name__)

# (name, email, password, role) provisioned on first initialization.
DEMO_USERS: tuple[tuple[str, str, str, Role], ...] = (
    ("Mr. Raj", "raj@school.com", "12345", Role.TEACHER),
    ("Amit", "amit@student.com", "12345", Role.STUDENT),
    ("Sara", "sara@student.com", "12345", Role.STUDENT),
    ("Ravi", "ravi@student.com", "12345", Role.STUDENT),
)


def _connect(target: DBConfig, *, with_database: bool = True):
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
    # schema.sql must work whatever the configured database name is.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ``;`` outside quotes and ``--`` comments."""
    buf: list[str] = []
    quote: str | None = None
    escape = False
    lines = (line for line in sql.splitlines(keepends=True) if not line.lstrip().startswith("--"))

    for ch in "".join(lines):
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
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
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    """Create tables from schema.sql (idempotent: CREATE TABLE IF NOT EXISTS)."""
    target = DBConfig.from_dict(db_config)
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied to %s", target.describe())


def ensure_demo_users(db_config: dict) -> int:
    """Insert the bootstrap teacher and students that are missing.

    Existing rows (matched by email) are left untouched. Returns the number of
    users inserted.
    """
    target = DBConfig.from_dict(db_config)
    conn = _connect(target)
    inserted = 0
    try:
        cur = conn.cursor()
        for name, email, password, role in DEMO_USERS:
            cur.execute("SELECT id FROM users WHERE email=%s", (email,))
            if cur.fetchone():
                continue
            cur.execute(
                "INSERT INTO users (name, email, password, role) VALUES (%s, %s, %s, %s)",
                (name, email, password, role.value),
            )
            inserted += 1
        conn.commit()
    finally:
        conn.close()

    logger.info("Demo users ready (%d inserted)", inserted)
    return inserted


def list_tables(db_config: dict) -> list[str]:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
