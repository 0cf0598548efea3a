from __future__ import annotations

from flask import jsonify


def json_error(reason: str, message: str, status: int):
    """Failure body shared by every endpoint."""
    return jsonify({"success": False, "error": reason, "message": message}), status


def json_ok(status: int = 200, **payload):
    return jsonify({"success": True, **payload}), status
