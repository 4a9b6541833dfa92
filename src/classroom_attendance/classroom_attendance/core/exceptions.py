class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidJSONError(ValidationError):
    """Raised when a realtime message is not valid JSON."""


class UnknownEventError(ValidationError):
    """Raised when a realtime envelope names an event nobody handles."""


class AuthenticationError(DomainError):
    """Raised when credentials or tokens are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a class, user or record does not exist."""


class NoActiveSessionError(DomainError):
    """Raised when a session operation runs while no session is active."""


class SessionBusyError(DomainError):
    """Raised when the active session is being committed."""
