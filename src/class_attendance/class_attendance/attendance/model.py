from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..core.constants import DEFAULTER_THRESHOLD
from ..core.enums import AttendanceStatus, Standing
from ..users.model import User


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's status on one roll-call day."""

    attendance_id: int
    student_id: int
    date: date
    status: AttendanceStatus


@dataclass(frozen=True)
class MarkEntry:
    """One line of a mark batch, before it is written."""

    student_id: int
    status: AttendanceStatus


@dataclass(frozen=True)
class MarkedDay:
    """Read-model: a roll-call day and how many records it produced."""

    date: date
    record_count: int
    marked_at: datetime

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "count": self.record_count,
            "marked_at": self.marked_at.strftime("%Y-%m-%d %H:%M:%S"),
        }


def classify(percentage: int) -> Standing:
    """Satisfactory at or above the threshold, defaulter below it."""
    return Standing.SATISFACTORY if percentage >= DEFAULTER_THRESHOLD else Standing.DEFAULTER


@dataclass(frozen=True)
class Aggregate:
    """Derived counts for one student; recomputed on every read."""

    present: int
    absent: int
    total: int
    percentage: int

    @property
    def standing(self) -> Standing:
        return classify(self.percentage)

    def to_dict(self) -> dict:
        return {
            "present": self.present,
            "absent": self.absent,
            "total": self.total,
            "percentage": self.percentage,
            "standing": self.standing.value,
        }


@dataclass(frozen=True)
class RosterEntry:
    user: User
    aggregate: Aggregate

    @property
    def percentage(self) -> int:
        return self.aggregate.percentage

    def to_dict(self) -> dict:
        return {
            "id": self.user.user_id,
            "name": self.user.name,
            "email": self.user.email,
            "percentage": self.aggregate.percentage,
            "standing": self.aggregate.standing.value,
        }
