"""
Error taxonomy shared by all service layers.

Each app defines its own domain exceptions in ``services/exceptions.py``
(or ``exceptions.py``) and derives them from one of the four kinds below.
Views catch the domain exceptions and convert them to HTTP responses.

Exception Hierarchy:
    RationServiceError (base)
    ├── ValidationError   -> 400
    ├── NotFoundError     -> 404
    ├── AuthError         -> 401/403
    └── StorageError      -> 500 (logged, generic message to client)
"""


class RationServiceError(Exception):
    """Base exception for all service-layer errors."""
    pass


class ValidationError(RationServiceError):
    """Bad input shape or business invariant violation. User-correctable."""
    pass


class NotFoundError(RationServiceError):
    """Referenced entity does not exist."""
    pass


class AuthError(RationServiceError):
    """Missing or invalid credentials, or insufficient role/ownership."""
    pass


class StorageError(RationServiceError):
    """Underlying persistence failure."""
    pass
