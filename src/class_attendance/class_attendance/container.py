from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from .attendance.aggregation import AggregationEngine
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import today_local
from .database.connection import DBConfig, DatabaseConnection
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    attendance_repo: AttendanceRepository

    aggregation: AggregationEngine
    auth_service: AuthService
    attendance_service: AttendanceService


def wire(
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    *,
    conn: Optional[DatabaseConnection] = None,
    clock: Callable[[], date] = today_local,
) -> Container:
    """Assemble services on top of any repository implementations."""
    aggregation = AggregationEngine(attendance_repo, users_repo)
    return Container(
        conn=conn,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        aggregation=aggregation,
        auth_service=AuthService(users_repo),
        attendance_service=AttendanceService(attendance_repo, aggregation, clock=clock),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    return wire(
        MySQLUserRepository(conn),
        MySQLAttendanceRepository(conn),
        conn=conn,
    )
