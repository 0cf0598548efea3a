from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Account store interface.

    Services depend on this protocol, never on a concrete database.
    """

    def find_by_credentials(self, email: str, password: str, role: Role) -> Optional[User]:
        """Exact, case-sensitive match on all three fields.

        Returns None unless exactly one account matches.
        """
        raise NotImplementedError

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def list_students(self) -> Sequence[User]:
        """Students in creation order."""
        raise NotImplementedError
