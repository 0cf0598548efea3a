from __future__ import annotations

from datetime import date
from typing import Mapping, Protocol, Sequence

from .model import AttendanceRecord, MarkEntry, MarkedDay


class AttendanceRepository(Protocol):
    """The attendance ledger: append-only, one roll call per date."""

    def has_any_record_for(self, day: date) -> bool:
        raise NotImplementedError

    def append_batch(self, day: date, entries: Sequence[MarkEntry]) -> int:
        """Write every entry for ``day`` atomically and return the count.

        Raises AlreadyMarkedError if ``day`` already has records and
        UnknownStudentError if any entry is not an existing student; in both
        cases nothing is written. The existence check and the inserts must be
        one atomic unit.
        """
        raise NotImplementedError

    def records_for(self, student_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def records_for_all(self) -> Mapping[int, Sequence[AttendanceRecord]]:
        raise NotImplementedError

    def marked_days(self, limit: int) -> Sequence[MarkedDay]:
        """Most recent roll-call days first."""
        raise NotImplementedError
