"""
Application-wide exception hierarchy.

Services raise these; blueprints register handlers against them once and
get consistent HTTP status codes everywhere.

Usage:
    from gradtrack.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="Task", resource_id=42)
    raise ValidationError("Validation failed", details=[{"field": "title", "message": "..."}])
"""


class NotFoundError(Exception):
    """Raised when a requested resource does not exist for the current user.

    Used for BOTH genuinely missing records AND records owned by another
    user. A 403 would confirm the resource exists; a 404 does not.

    Args:
        resource: Human-readable model name (e.g. "University", "Task").
        resource_id: The PK that was looked up. Included in logs, not in HTTP response.
        user_id: Optional; the scope that was enforced. For debug logging only.
    """

    def __init__(
        self,
        resource: str,
        resource_id: int | str | None = None,
        user_id: int | None = None,
    ) -> None:
        self.resource = resource
        self.resource_id = resource_id
        self.user_id = user_id
        msg = f"{resource}"
        if resource_id is not None:
            msg += f" id={resource_id}"
        msg += " not found"
        if user_id is not None:
            msg += f" (user={user_id})"
        super().__init__(msg)

    @property
    def public_message(self) -> str:
        return f"{self.resource} not found"


class ValidationError(Exception):
    """Raised when request input fails field validation.

    Maps to HTTP 400 in blueprint error handlers.

    Args:
        message: Human-readable summary.
        details: Field-level breakdown, a list of ``{"field", "message"}`` dicts.
    """

    def __init__(self, message: str, details: list[dict] | None = None) -> None:
        self.details = details or []
        super().__init__(message)


class InvalidReferenceError(Exception):
    """Raised when a payload references an entity the caller does not own.

    Maps to HTTP 400. The referenced id is kept for logging only.
    """

    def __init__(self, resource: str, field: str, value=None) -> None:
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(f"Invalid {resource.lower()}")


class ConflictError(Exception):
    """Raised when an operation would create a duplicate unique value.

    Maps to HTTP 409.
    """

    def __init__(self, resource: str, field: str, value: str | None = None) -> None:
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(f"{resource} with {field}={value!r} already exists")


class AuthenticationError(Exception):
    """Raised when credentials are missing or wrong. Maps to HTTP 401."""
