"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class StoreUnavailableError(DomainError):
    """Backing store or an external data source could not be reached."""


class PermissionDeniedError(DomainError):
    """Caller lacks permission for the requested action."""
