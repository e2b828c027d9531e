"""
Error taxonomy for the notice board pipeline.

Every failure raised by the services derives from NoticeBoardError so the
routers can turn it into a {success: false, error} envelope.
"""
from typing import List, Optional


class NoticeBoardError(Exception):
    """Base class for all notice board errors"""


class FieldError:
    """A single violated field on a submission"""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message

    def to_dict(self):
        return {"field": self.field, "message": self.message}

    def __eq__(self, other):
        if not isinstance(other, FieldError):
            return NotImplemented
        return self.field == other.field and self.message == other.message

    def __repr__(self):
        return f"FieldError({self.field!r}, {self.message!r})"

    def __str__(self):
        return f"{self.field}: {self.message}"


class ValidationError(NoticeBoardError):
    """Submission failed field-level validation. User-correctable."""

    def __init__(self, field_errors: List[FieldError]):
        self.field_errors = list(field_errors)
        super().__init__("; ".join(str(e) for e in self.field_errors) or "Invalid submission")

    @property
    def fields(self) -> List[str]:
        return [e.field for e in self.field_errors]


class StorageError(NoticeBoardError):
    """File store failure. `reason` tells permission, capacity and missing-path causes apart."""

    PERMISSION = "permission"
    CAPACITY = "capacity"
    MISSING_PATH = "missing_path"
    SIZE_EXCEEDED = "size_exceeded"
    IO = "io"

    def __init__(self, message: str, reason: str = IO, stored_name: Optional[str] = None):
        super().__init__(message)
        self.reason = reason
        self.stored_name = stored_name


class PersistenceError(NoticeBoardError):
    """Document store write, read or connection failure"""


class ConfigurationError(NoticeBoardError):
    """Fatal misconfiguration; the process must not serve requests"""
