"""Error handling utilities."""


class RentalError(Exception):
    """Base exception for the KTM Rental backend."""
    pass


class ConfigurationError(RentalError):
    """Required configuration is missing."""
    pass


class ValidationError(RentalError):
    """Submitted data is malformed or missing required fields."""
    pass


class AuthorizationError(RentalError):
    """Caller is not allowed to perform the operation."""
    pass


class AuthenticationError(AuthorizationError):
    """No authenticated identity was supplied."""
    pass


class NotFoundError(RentalError):
    """Record does not exist."""
    pass


class InvalidTransitionError(RentalError):
    """Status transition is not allowed from the record's current state."""
    pass


class PersistenceError(RentalError):
    """Supabase operation error."""
    pass


class UploadError(RentalError):
    """Image upload to storage failed."""
    pass
