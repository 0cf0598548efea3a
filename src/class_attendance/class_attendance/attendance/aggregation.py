"""Read-side roll-up of the attendance ledger.

Nothing here is stored or cached: every call reads the ledger again, so
results always reflect what the ledger holds at that moment.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List

from ..core.enums import AttendanceStatus, Standing
from ..core.exceptions import DataIntegrityError
from ..users.repository import UserRepository
from .model import Aggregate, AttendanceRecord, RosterEntry, classify
from .repository import AttendanceRepository


def attendance_percentage(present: int, total: int) -> int:
    """present/total as a whole percentage, rounded half up; 0 when total is 0."""
    if total <= 0:
        return 0
    ratio = Decimal(present) * 100 / Decimal(total)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def aggregate_records(records: Iterable[AttendanceRecord]) -> Aggregate:
    present = 0
    absent = 0
    for r in records:
        if r.status == AttendanceStatus.PRESENT:
            present += 1
        elif r.status == AttendanceStatus.ABSENT:
            absent += 1
        else:
            raise DataIntegrityError(f"Attendance record {r.attendance_id} has unknown status {r.status!r}")

    total = present + absent
    return Aggregate(present=present, absent=absent, total=total, percentage=attendance_percentage(present, total))


class AggregationEngine:
    def __init__(self, attendance: AttendanceRepository, users: UserRepository):
        self._attendance = attendance
        self._users = users

    def summarize(self, student_id: int) -> Aggregate:
        return aggregate_records(self._attendance.records_for(int(student_id)))

    def summarize_roster(self) -> List[RosterEntry]:
        # Students without records still get a row (0%) so a teacher can act on them.
        by_student = self._attendance.records_for_all()
        return [
            RosterEntry(user=s, aggregate=aggregate_records(by_student.get(s.user_id, ())))
            for s in self._users.list_students()
        ]

    @staticmethod
    def classify(percentage: int) -> Standing:
        return classify(percentage)
