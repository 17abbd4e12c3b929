class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when a device secret or admin credential is missing or wrong."""


class AuthorizationError(DomainError):
    """Raised when an authenticated caller may not perform an action."""


class NotFoundError(DomainError):
    """Raised when a referenced event, student or card does not exist."""


class ConflictError(DomainError):
    """Raised when a write collides with existing state."""

    def __init__(self, message: str, *, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class UnavailableError(DomainError):
    """Raised when an operation needs an active event and there is none."""


class ConfigurationError(DomainError):
    """Raised when the server lacks required configuration (fails closed)."""


class InvariantViolationError(DomainError):
    """Raised when stored state breaks an invariant the engine relies on."""


class DuplicateEntryError(ConflictError):
    """Raised by repositories when the store rejects a write on a unique key."""


class CardNotRegisteredError(NotFoundError):
    """No student is bound to the tapped card."""


class NotRegisteredForEventError(AuthorizationError):
    """The student holds a bound card but is not registered for the event."""


class AlreadyCheckedInError(ConflictError):
    """Attendance for (student, event) already exists."""
