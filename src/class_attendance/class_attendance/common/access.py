"""Session-scoped access checks for the JSON endpoints.

``/login`` stores the user id and role in Flask's signed session cookie; the
decorators below read them back instead of trusting ids sent by the client.
"""

from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import session

from ..core.enums import Role
from ..users.model import User
from .responses import json_error


def start_session(user: User) -> None:
    session.clear()
    session["user_id"] = user.user_id
    session["role"] = user.role.value
    session["name"] = user.name


def end_session() -> None:
    session.clear()


def current_role() -> Optional[Role]:
    try:
        return Role(session.get("role"))
    except ValueError:
        return None


def _unauthorized():
    return json_error("unauthorized", "Please log in to continue", 401)


def _forbidden():
    return json_error("forbidden", "You do not have access to this resource", 403)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session or current_role() is None:
            return _unauthorized()
        return view(*args, **kwargs)

    return wrapper


def teacher_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return _unauthorized()
        if current_role() != Role.TEACHER:
            return _forbidden()
        return view(*args, **kwargs)

    return wrapper


def self_or_teacher_required(view):
    """Teachers see any student; a student only sees ``student_id == own id``."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return _unauthorized()

        role = current_role()
        if role == Role.TEACHER:
            return view(*args, **kwargs)
        if role == Role.STUDENT and int(kwargs.get("student_id", -1)) == int(session["user_id"]):
            return view(*args, **kwargs)
        return _forbidden()

    return wrapper
