from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an account, teacher or student.

    Plain data object; no DB access here. Provisioned by seeding and never
    modified by the application.
    """

    user_id: int
    name: str
    email: str
    password: str
    role: Role

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT

    def to_public(self) -> dict:
        return {"id": self.user_id, "name": self.name, "email": self.email, "role": self.role.value}
