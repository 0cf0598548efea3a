from __future__ import annotations

from datetime import date

import pytest
from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from src.class_attendance.class_attendance.attendance.model import MarkEntry
from src.class_attendance.class_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.class_attendance.class_attendance.core.enums import AttendanceStatus
from src.class_attendance.class_attendance.core.exceptions import (
    AlreadyMarkedError,
    DataIntegrityError,
    UnknownStudentError,
    ValidationError,
)

P = AttendanceStatus.PRESENT
A = AttendanceStatus.ABSENT
DAY = date(2024, 5, 1)


class FakeCursor:
    def __init__(self, db):
        self._db = db
        self._rows = []

    def execute(self, sql, params=()):
        self._db.statements.append(sql.strip())
        if "FROM users" in sql:
            ids = params[1:]
            self._rows = [{"id": i} for i in ids if i in self._db.students]
        elif sql.strip().startswith("INSERT INTO attendance_days"):
            if params[0] in self._db.days:
                raise IntegrityError(msg="Duplicate entry for key 'PRIMARY'", errno=errorcode.ER_DUP_ENTRY)
            self._db.pending_days.append(params[0])
        elif "FROM attendance_days" in sql:
            self._rows = [{"found": 1}] if params[0] in self._db.days else []
        elif "FROM attendance" in sql:
            self._rows = list(self._db.rows)

    def executemany(self, sql, seq):
        self._db.statements.append(sql.strip())
        if self._db.records_error is not None:
            raise IntegrityError(msg="Cannot insert attendance rows", errno=self._db.records_error)
        self._db.pending_records.extend(seq)

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return list(self._rows)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, db):
        self._db = db

    def cursor(self, dictionary=False):
        return FakeCursor(self._db)

    def commit(self):
        self._db.days.update(self._db.pending_days)
        self._db.records.extend(self._db.pending_records)
        self._db.commits += 1
        self._db.reset_pending()

    def rollback(self):
        self._db.rollbacks += 1
        self._db.reset_pending()

    def close(self):
        pass


class FakeDatabase:
    """Stands in for DatabaseConnection: hands out fake transactional connections."""

    def __init__(self, students=(2, 3, 4)):
        self.students = set(students)
        self.days: set[date] = set()
        self.records: list[tuple] = []
        self.rows: list[dict] = []
        self.statements: list[str] = []
        self.commits = 0
        self.rollbacks = 0
        self.records_error: int | None = None
        self.reset_pending()

    def reset_pending(self):
        self.pending_days: list[date] = []
        self.pending_records: list[tuple] = []

    def connect(self):
        return FakeConnection(self)


def test_append_batch_commits_marker_and_records_together():
    db = FakeDatabase()
    repo = MySQLAttendanceRepository(db)

    assert repo.append_batch(DAY, [MarkEntry(2, P), MarkEntry(3, A)]) == 2

    assert db.days == {DAY}
    assert db.records == [(2, DAY, "present"), (3, DAY, "absent")]
    assert db.commits == 1 and db.rollbacks == 0
    assert repo.has_any_record_for(DAY)


def test_duplicate_day_maps_to_already_marked_and_rolls_back():
    db = FakeDatabase()
    db.days.add(DAY)
    repo = MySQLAttendanceRepository(db)

    with pytest.raises(AlreadyMarkedError):
        repo.append_batch(DAY, [MarkEntry(2, P)])

    assert db.records == []
    assert db.rollbacks == 1
    assert not any(s.startswith("INSERT INTO attendance(") for s in db.statements)


def test_unknown_student_rejects_whole_batch_before_writing():
    db = FakeDatabase(students=(2, 3))
    repo = MySQLAttendanceRepository(db)

    with pytest.raises(UnknownStudentError) as exc:
        repo.append_batch(DAY, [MarkEntry(2, P), MarkEntry(9, P)])

    assert exc.value.student_ids == [9]
    assert db.days == set() and db.records == []
    assert db.rollbacks == 1
    assert not any(s.startswith("INSERT") for s in db.statements)


def test_records_for_all_groups_by_student():
    db = FakeDatabase()
    db.rows = [
        {"id": 1, "student_id": 2, "date": DAY, "status": "present"},
        {"id": 2, "student_id": 3, "date": DAY, "status": "absent"},
        {"id": 3, "student_id": 2, "date": date(2024, 5, 2), "status": "absent"},
    ]
    repo = MySQLAttendanceRepository(db)

    grouped = repo.records_for_all()

    assert sorted(grouped) == [2, 3]
    assert [r.status for r in grouped[2]] == [P, A]


def test_unknown_stored_status_is_an_integrity_error():
    db = FakeDatabase()
    db.rows = [{"id": 7, "student_id": 2, "date": DAY, "status": "late"}]
    repo = MySQLAttendanceRepository(db)

    with pytest.raises(DataIntegrityError):
        repo.records_for(2)


def test_foreign_key_failure_on_records_rolls_back_day_marker():
    db = FakeDatabase()
    db.records_error = errorcode.ER_NO_REFERENCED_ROW_2
    repo = MySQLAttendanceRepository(db)

    with pytest.raises(UnknownStudentError):
        repo.append_batch(DAY, [MarkEntry(2, P), MarkEntry(3, A)])

    assert any(s.startswith("INSERT INTO attendance_days") for s in db.statements)
    assert db.days == set() and db.records == []
    assert db.commits == 0 and db.rollbacks == 1
    assert not repo.has_any_record_for(DAY)


def test_duplicate_record_rolls_back_day_marker():
    db = FakeDatabase()
    db.records_error = errorcode.ER_DUP_ENTRY
    repo = MySQLAttendanceRepository(db)

    with pytest.raises(ValidationError) as exc:
        repo.append_batch(DAY, [MarkEntry(2, P)])

    assert not isinstance(exc.value, UnknownStudentError)
    assert db.days == set() and db.records == []
    assert db.rollbacks == 1

    # The day is still free once the bad batch is gone.
    db.records_error = None
    assert repo.append_batch(DAY, [MarkEntry(2, P)]) == 1
    assert db.days == {DAY}
