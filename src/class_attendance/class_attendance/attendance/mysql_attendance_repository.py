from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Mapping, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AlreadyMarkedError, DataIntegrityError, UnknownStudentError, ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import AttendanceRecord, MarkEntry, MarkedDay
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _to_record(row: dict) -> AttendanceRecord:
    try:
        status = AttendanceStatus(row["status"])
    except ValueError:
        raise DataIntegrityError(
            f"Attendance row {row['id']} has unknown status {row['status']!r}"
        ) from None
    return AttendanceRecord(
        attendance_id=int(row["id"]),
        student_id=int(row["student_id"]),
        date=row["date"],
        status=status,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def has_any_record_for(self, day: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM attendance_days WHERE date=%s", (day,))
            return fetchone(cur) is not None

    def append_batch(self, day: date, entries: Sequence[MarkEntry]) -> int:
        if not entries:
            raise ValidationError("Attendance batch is empty")

        student_ids = sorted({int(e.student_id) for e in entries})

        # The day marker and every record go into one transaction: a second
        # caller for the same day fails on the attendance_days primary key and
        # db_cursor rolls back whatever it had written.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT id FROM users WHERE role=%s AND id IN ({in_clause(student_ids)})",
                (Role.STUDENT.value, *student_ids),
            )
            found = {int(r["id"]) for r in fetchall(cur)}
            missing = set(student_ids) - found
            if missing:
                raise UnknownStudentError(missing)

            try:
                cur.execute(
                    "INSERT INTO attendance_days(date, record_count, marked_at) VALUES(%s,%s,%s)",
                    (day, len(entries), now_local()),
                )
            except mysql.connector.IntegrityError as e:
                if e.errno == errorcode.ER_DUP_ENTRY:
                    raise AlreadyMarkedError(f"Attendance already marked for {day.isoformat()}") from e
                raise

            try:
                cur.executemany(
                    "INSERT INTO attendance(student_id, date, status) VALUES(%s,%s,%s)",
                    [(int(e.student_id), day, e.status.value) for e in entries],
                )
            except mysql.connector.IntegrityError as e:
                if e.errno == errorcode.ER_DUP_ENTRY:
                    raise ValidationError("A student appears more than once in the batch") from e
                if e.errno in (errorcode.ER_NO_REFERENCED_ROW, errorcode.ER_NO_REFERENCED_ROW_2):
                    raise UnknownStudentError(student_ids) from e
                raise

        logger.info("Roll call stored for %s (%d records)", day.isoformat(), len(entries))
        return len(entries)

    def records_for(self, student_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, student_id, date, status
                FROM attendance
                WHERE student_id=%s
                ORDER BY date ASC
                """,
                (int(student_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def records_for_all(self) -> Mapping[int, Sequence[AttendanceRecord]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, student_id, date, status
                FROM attendance
                ORDER BY student_id ASC, date ASC
                """
            )
            out: Dict[int, List[AttendanceRecord]] = {}
            for r in fetchall(cur):
                rec = _to_record(r)
                out.setdefault(rec.student_id, []).append(rec)
            return out

    def marked_days(self, limit: int) -> Sequence[MarkedDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT date, record_count, marked_at
                FROM attendance_days
                ORDER BY date DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [
                MarkedDay(date=r["date"], record_count=int(r["record_count"]), marked_at=r["marked_at"])
                for r in fetchall(cur)
            ]
