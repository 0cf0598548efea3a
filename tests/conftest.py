from __future__ import annotations

import threading
from datetime import date, datetime
from typing import Optional, Sequence

import pytest

from src.class_attendance.class_attendance.attendance.model import AttendanceRecord, MarkEntry, MarkedDay
from src.class_attendance.class_attendance.container import wire
from src.class_attendance.class_attendance.core.enums import Role
from src.class_attendance.class_attendance.core.exceptions import (
    AlreadyMarkedError,
    UnknownStudentError,
    ValidationError,
)
from src.class_attendance.class_attendance.main import create_app
from src.class_attendance.class_attendance.users.model import User


class InMemoryUsers:
    def __init__(self, users: Sequence[User] = ()):
        self._users: list[User] = list(users)

    def add(self, name: str, email: str, password: str, role: Role) -> User:
        user = User(user_id=len(self._users) + 1, name=name, email=email, password=password, role=role)
        self._users.append(user)
        return user

    def find_by_credentials(self, email: str, password: str, role: Role) -> Optional[User]:
        hits = [u for u in self._users if u.email == email and u.password == password and u.role == role]
        return hits[0] if len(hits) == 1 else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return next((u for u in self._users if u.user_id == user_id), None)

    def list_students(self) -> Sequence[User]:
        return [u for u in self._users if u.role == Role.STUDENT]


class InMemoryAttendance:
    """Ledger fake; the lock plays the role of the database transaction."""

    def __init__(self, users: InMemoryUsers):
        self._users = users
        self._records: list[AttendanceRecord] = []
        self._days: dict[date, MarkedDay] = {}
        self._lock = threading.Lock()

    @property
    def count(self) -> int:
        return len(self._records)

    def has_any_record_for(self, day: date) -> bool:
        return day in self._days

    def append_batch(self, day: date, entries: Sequence[MarkEntry]) -> int:
        if not entries:
            raise ValidationError("Attendance batch is empty")
        with self._lock:
            student_ids = {e.student_id for e in entries}
            known = {s.user_id for s in self._users.list_students()}
            if student_ids - known:
                raise UnknownStudentError(student_ids - known)
            if day in self._days:
                raise AlreadyMarkedError(f"Attendance already marked for {day.isoformat()}")

            start = len(self._records)
            self._records.extend(
                AttendanceRecord(attendance_id=start + i + 1, student_id=e.student_id, date=day, status=e.status)
                for i, e in enumerate(entries)
            )
            self._days[day] = MarkedDay(date=day, record_count=len(entries), marked_at=datetime(2024, 5, 1, 9, 0))
            return len(entries)

    def insert_raw(self, record: AttendanceRecord) -> None:
        # Bypasses every check; used to simulate corrupted rows.
        self._records.append(record)

    def records_for(self, student_id: int) -> Sequence[AttendanceRecord]:
        return [r for r in self._records if r.student_id == student_id]

    def records_for_all(self):
        out: dict[int, list[AttendanceRecord]] = {}
        for r in self._records:
            out.setdefault(r.student_id, []).append(r)
        return out

    def marked_days(self, limit: int) -> Sequence[MarkedDay]:
        return sorted(self._days.values(), key=lambda d: d.date, reverse=True)[:limit]


@pytest.fixture
def fixed_now():
    return datetime(2024, 5, 1, 9, 30, 0)


@pytest.fixture
def users_repo():
    repo = InMemoryUsers()
    repo.add("Mr. Raj", "raj@school.com", "12345", Role.TEACHER)
    repo.add("Amit", "amit@student.com", "12345", Role.STUDENT)
    repo.add("Sara", "sara@student.com", "12345", Role.STUDENT)
    repo.add("Ravi", "ravi@student.com", "12345", Role.STUDENT)
    return repo


@pytest.fixture
def attendance_repo(users_repo):
    return InMemoryAttendance(users_repo)


@pytest.fixture
def clock(fixed_now):
    """Mutable "today" so tests can move the server date forward."""

    class _Clock:
        today = fixed_now.date()

        def __call__(self) -> date:
            return self.today

    return _Clock()


@pytest.fixture
def container(users_repo, attendance_repo, clock):
    return wire(users_repo, attendance_repo, clock=clock)


@pytest.fixture
def app(container):
    app = create_app(container=container, settings_module="config.testing")
    return app


@pytest.fixture
def client(app):
    return app.test_client()
