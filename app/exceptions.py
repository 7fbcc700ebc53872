"""
Domain errors raised by the content services.

Every error aborts the current operation; the request session rolls back and
the exception handlers in ``app.main`` turn the error into a JSON response
carrying enough context (field, id, dependents) for the caller to react.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional


class ContentError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 400

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, "error": type(self).__name__, **self.context}


class ValidationError(ContentError):
    """One or more fields were rejected; nothing was written."""

    status_code = 422

    def __init__(self, errors: Dict[str, List[str]], message: str = "The given data was invalid.") -> None:
        super().__init__(message, errors=errors)
        self.errors = errors

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls({field: [message]}, message)


class UniquenessConflict(ContentError):
    """A unique field (usually ``slug``) is already taken."""

    status_code = 409

    def __init__(self, field: str, value: Any = None, message: Optional[str] = None) -> None:
        super().__init__(
            message or f"The {field} '{value}' has already been taken.",
            field=field,
            value=value,
        )
        self.field = field
        self.value = value


class DependencyConflict(ContentError):
    """A delete was refused because other rows still depend on the target."""

    status_code = 409

    def __init__(self, entity: str, dependents: str, count: int) -> None:
        super().__init__(
            f"Cannot delete {entity}. It has {count} {dependents} attached. "
            f"Remove or reassign the {dependents} first.",
            entity=entity,
            dependents=dependents,
            count=count,
        )
        self.count = count


class NotFound(ContentError):
    """A referenced entity or scope does not exist."""

    status_code = 404

    def __init__(self, entity: str, identifier: Any) -> None:
        super().__init__(f"{entity} {identifier} not found.", entity=entity, identifier=identifier)


class StorageFailure(ContentError):
    """Writing or deleting a stored file failed."""

    status_code = 500

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message, path=path)
        self.path = path
