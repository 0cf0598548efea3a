from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role, used both for login lookup and for access checks."""

    TEACHER = "teacher"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Status stored per student per roll-call day."""

    PRESENT = "present"
    ABSENT = "absent"


class Standing(str, Enum):
    """Classification derived from the attendance percentage (never stored)."""

    SATISFACTORY = "satisfactory"
    DEFAULTER = "defaulter"
