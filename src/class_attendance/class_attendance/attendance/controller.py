from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.access import self_or_teacher_required, teacher_required
from ..common.responses import json_error, json_ok
from ..core.constants import DEFAULT_MARKED_DAYS_LIMIT
from ..core.exceptions import AlreadyMarkedError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def _store_error(action: str):
    logger.exception("System error while %s", action)
    return json_error("store error", "Database error", 500)


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/students", methods=["GET"], endpoint="students")
    @teacher_required
    def students():
        try:
            roster = service.get_roster()
        except Exception:
            return _store_error("building the roster")
        return jsonify([row.to_dict() for row in roster])

    @app.route("/mark", methods=["POST"], endpoint="mark")
    @teacher_required
    def mark():
        try:
            result = service.mark_today_payload(request.get_json(silent=True))
        except AlreadyMarkedError:
            return json_error("already marked", "Attendance already marked for today", 400)
        except ValidationError as e:
            logger.info("Mark rejected: %s", e)
            return json_error("invalid data", str(e), 400)
        except Exception:
            return _store_error("marking attendance")

        return json_ok(
            message="Attendance marked successfully",
            date=result.date.isoformat(),
            count=result.count,
        )

    @app.route("/attendance/<int:student_id>", methods=["GET"], endpoint="attendance_summary")
    @self_or_teacher_required
    def attendance_summary(student_id: int):
        try:
            summary = service.get_summary(student_id)
        except Exception:
            return _store_error(f"summarizing student {student_id}")
        return jsonify(summary.to_dict())

    @app.route("/attendance/today", methods=["GET"], endpoint="attendance_today")
    @teacher_required
    def attendance_today():
        try:
            marked = service.is_marked_today()
        except Exception:
            return _store_error("checking today's roll call")
        return jsonify({"date": service.today().isoformat(), "marked": marked})

    @app.route("/attendance/days", methods=["GET"], endpoint="attendance_days")
    @teacher_required
    def attendance_days():
        limit = request.args.get("limit", DEFAULT_MARKED_DAYS_LIMIT, type=int)
        if limit < 1:
            return json_error("invalid data", "limit must be positive", 400)
        try:
            days = service.list_marked_days(limit=limit)
        except Exception:
            return _store_error("listing roll-call days")
        return jsonify([d.to_dict() for d in days])
