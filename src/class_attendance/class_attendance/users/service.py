from __future__ import annotations

import logging
from typing import Any, Mapping

from ..common.validators import require_fields
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate a user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str, role: str) -> User:
        if not email or not password or not role:
            raise ValidationError("missing fields")

        try:
            wanted = Role(role)
        except ValueError:
            # An unknown role can never match an account.
            raise AuthenticationError("invalid credentials") from None

        user = self._users.find_by_credentials(email, password, wanted)
        if not user:
            logger.info("Login rejected for %s as %s", email, role)
            raise AuthenticationError("invalid credentials")

        logger.info("Login ok for user %s (%s)", user.user_id, user.role.value)
        return user

    def authenticate_payload(self, payload: Mapping[str, Any] | None) -> User:
        fields = require_fields(payload, "email", "password", "role")
        return self.authenticate(fields["email"], fields["password"], fields["role"])

    def current_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise AuthenticationError("invalid credentials")
        return user
