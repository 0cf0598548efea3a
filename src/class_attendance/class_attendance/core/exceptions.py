class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AlreadyMarkedError(DomainError):
    """Raised when a roll call was already taken for the requested date."""


class UnknownStudentError(ValidationError):
    """Raised when a mark batch references an id that is not a student."""

    def __init__(self, student_ids):
        self.student_ids = sorted(student_ids)
        super().__init__(f"Unknown student id(s): {', '.join(map(str, self.student_ids))}")


class DataIntegrityError(DomainError):
    """Raised when stored data breaks an invariant (e.g. an unknown status)."""


class StorageError(DomainError):
    """Raised when the persistence layer is unavailable."""
