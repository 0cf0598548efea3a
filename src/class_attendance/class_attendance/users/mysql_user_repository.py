from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["id"]),
        name=row["name"],
        email=row["email"],
        password=row["password"],
        role=Role(row["role"]),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_by_credentials(self, email: str, password: str, role: Role) -> Optional[User]:
        # BINARY forces a case-sensitive comparison under the default *_ci collation.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, name, email, password, role
                FROM users
                WHERE BINARY email=%s AND BINARY password=%s AND role=%s
                LIMIT 2
                """,
                (email, password, role.value),
            )
            rows = fetchall(cur)
            if len(rows) != 1:
                return None
            return _to_user(rows[0])

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, name, email, password, role FROM users WHERE id=%s",
                (int(user_id),),
            )
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_students(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, name, email, password, role
                FROM users
                WHERE role=%s
                ORDER BY id ASC
                """,
                (Role.STUDENT.value,),
            )
            return [_to_user(r) for r in fetchall(cur)]
