from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, List, Mapping, Optional, Sequence

from ..common.datetime_utils import today_local
from ..common.validators import require_int
from ..core.constants import DEFAULT_MARKED_DAYS_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import AlreadyMarkedError, ValidationError
from .aggregation import AggregationEngine
from .model import Aggregate, MarkEntry, MarkedDay, RosterEntry
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkResult:
    date: date
    count: int


def parse_mark_entries(payload: Mapping[str, Any] | None) -> List[MarkEntry]:
    """Turn ``{"attendance": [{"student_id", "status"}, ...]}`` into entries.

    Rejects a missing or empty list, unknown statuses, non-integer ids and
    the same student listed twice.
    """
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")

    items = payload.get("attendance")
    if not isinstance(items, list) or not items:
        raise ValidationError("attendance must be a non-empty list")

    entries: List[MarkEntry] = []
    seen: set[int] = set()
    for i, item in enumerate(items):
        if not isinstance(item, Mapping):
            raise ValidationError(f"attendance[{i}] must be an object")

        student_id = require_int(item.get("student_id"), f"attendance[{i}].student_id")
        try:
            status = AttendanceStatus(item.get("status"))
        except ValueError:
            raise ValidationError(f"attendance[{i}].status must be 'present' or 'absent'") from None

        if student_id in seen:
            raise ValidationError(f"Student {student_id} is listed more than once")
        seen.add(student_id)
        entries.append(MarkEntry(student_id=student_id, status=status))
    return entries


class AttendanceService:
    """Use cases: take today's roll call and read attendance summaries."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        engine: AggregationEngine,
        *,
        clock: Callable[[], date] = today_local,
    ):
        self._attendance = attendance
        self._engine = engine
        self._clock = clock

    def today(self) -> date:
        return self._clock()

    def mark_today(self, entries: Sequence[MarkEntry], *, today: Optional[date] = None) -> MarkResult:
        if not entries:
            raise ValidationError("attendance must be a non-empty list")

        day = today or self._clock()

        # Cheap early exit; the repository repeats the check atomically.
        if self._attendance.has_any_record_for(day):
            logger.info("Roll call for %s rejected: already marked", day.isoformat())
            raise AlreadyMarkedError(f"Attendance already marked for {day.isoformat()}")

        count = self._attendance.append_batch(day, list(entries))
        return MarkResult(date=day, count=count)

    def mark_today_payload(self, payload: Mapping[str, Any] | None) -> MarkResult:
        return self.mark_today(parse_mark_entries(payload))

    def is_marked_today(self) -> bool:
        return self._attendance.has_any_record_for(self._clock())

    def get_roster(self) -> List[RosterEntry]:
        return self._engine.summarize_roster()

    def get_summary(self, student_id: int) -> Aggregate:
        return self._engine.summarize(student_id)

    def list_marked_days(self, *, limit: int = DEFAULT_MARKED_DAYS_LIMIT) -> Sequence[MarkedDay]:
        return self._attendance.marked_days(limit)
