"""
Employees API — Custom Exception Hierarchy
===========================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a message, an optional context dict, a fixed
       HTTP status code and a stable machine-readable error code. The global
       exception handler (registered in main.py) turns them into JSON bodies.
Who:   Raised by backends, services and auth dependencies; caught by handlers.

Exception Hierarchy:
    EmployeesApiError (base)                → 500
    ├── NotFoundError                       → 404 Not Found
    ├── AlreadyExistsError                  → 409 Conflict
    ├── ValidationError                     → 400 Bad Request
    ├── LoginError                          → 400 Bad Request
    ├── AuthenticationError                 → 401 Unauthorized
    ├── AuthorizationError                  → 403 Forbidden
    ├── FileStorageError                    → 500 Internal Server Error
    ├── DatabaseError                       → 500 Internal Server Error
    ├── BackendClosedError                  → 500 (programming error)
    ├── BackendUnavailableError             → 503 Service Unavailable
    └── RegistryError                       → fatal at startup
        ├── DuplicateRegistrationError
        └── UnknownBackendError

NotFoundError and AlreadyExistsError are the domain errors of the storage
contract. They are never retried and always reach the caller unchanged.
"""

from typing import Any, Dict, Iterable, Optional


class EmployeesApiError(Exception):
    """
    Base exception for all Employees API errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500
    error_code: str = "internal_server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


# ══════════════════════════════════════════════════════════════════════════
# Domain Errors — storage contract
# ══════════════════════════════════════════════════════════════════════════


class NotFoundError(EmployeesApiError):
    """
    Raised when the referenced employee does not exist.

    When:    get/update/delete with an id that is not in the store.
    HTTP:    404 Not Found
    """

    status_code = 404
    error_code = "not_found"

    def __init__(self, employee_id: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["employee_id"] = employee_id
        super().__init__(message=f"Employee with id {employee_id} not found", context=ctx)
        self.employee_id = employee_id


class AlreadyExistsError(EmployeesApiError):
    """
    Raised when an added employee carries an id that is already stored.

    When:    add_employee with a caller-supplied (or colliding) id.
    HTTP:    409 Conflict
    """

    status_code = 409
    error_code = "already_exists"

    def __init__(self, employee_id: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["employee_id"] = employee_id
        super().__init__(message=f"Employee with id {employee_id} already exists", context=ctx)
        self.employee_id = employee_id


# ══════════════════════════════════════════════════════════════════════════
# Request Errors — validation and auth
# ══════════════════════════════════════════════════════════════════════════


class ValidationError(EmployeesApiError):
    """
    Raised when client input fails validation.

    HTTP:    400 Bad Request (FastAPI's 422 for body validation is remapped to 400)
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class LoginError(EmployeesApiError):
    """Raised when login credentials are wrong. Same message for unknown user and bad password."""

    status_code = 400
    error_code = "login_error"

    def __init__(self, message: str = "Wrong Credentials", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class AuthenticationError(EmployeesApiError):
    """Raised when the bearer token is missing, malformed, expired or forged."""

    status_code = 401
    error_code = "authentication_error"

    def __init__(self, message: str = "Authentication Error", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class AuthorizationError(EmployeesApiError):
    """Raised when an authenticated user's role is not allowed on a route."""

    status_code = 403
    error_code = "authorization_error"

    def __init__(self, message: str = "Authorization Error", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


# ══════════════════════════════════════════════════════════════════════════
# Infrastructure Errors
# ══════════════════════════════════════════════════════════════════════════


class FileStorageError(EmployeesApiError):
    """
    Raised when the JSON data file cannot be read, parsed or written.

    HTTP:    500 Internal Server Error
    Note:    The response message never includes file system paths; the path
             and OS error are kept in `context` for the server log.
    """

    status_code = 500
    error_code = "internal_server_error"

    def __init__(
        self,
        message: str = "Employee data storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(EmployeesApiError):
    """
    Raised when the SQL or document store fails unexpectedly.

    When:    Connection lost mid-query, server unreachable, driver error.
    HTTP:    500 Internal Server Error
    Note:    The client always gets the generic message; the driver error is
             kept in `context` for the server log.
    """

    status_code = 500
    error_code = "internal_server_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class BackendClosedError(EmployeesApiError):
    """
    Raised when a backend is used after save() released its resources.

    This is a programming error, not a domain outcome: the active backend is
    never resurrected once closed.
    """

    status_code = 500
    error_code = "internal_server_error"

    def __init__(self, backend: str, operation: str):
        super().__init__(
            message=f"Employees backend '{backend}' is closed; '{operation}' is not allowed",
            context={"backend": backend, "operation": operation},
        )
        self.backend = backend
        self.operation = operation


class BackendUnavailableError(EmployeesApiError):
    """
    Raised when a request arrives before a backend has been resolved.

    HTTP:    503 Service Unavailable
    """

    status_code = 503
    error_code = "service_unavailable"

    def __init__(self, message: str = "Employees backend is not available"):
        super().__init__(message=message)


# ══════════════════════════════════════════════════════════════════════════
# Registry Errors — misconfiguration, fatal at startup
# ══════════════════════════════════════════════════════════════════════════


class RegistryError(EmployeesApiError):
    """Base class for backend registry misconfiguration."""

    error_code = "registry_error"


class DuplicateRegistrationError(RegistryError):
    """Raised when a backend key is registered twice on the same registry."""

    def __init__(self, key: str):
        super().__init__(
            message=f"Factory with key {key} is already registered.",
            context={"key": key},
        )
        self.key = key


class UnknownBackendError(RegistryError):
    """Raised when resolving a key that no backend registered."""

    def __init__(self, key: Optional[str], known_keys: Iterable[str]):
        self.key = key
        self.known_keys = sorted(known_keys)
        super().__init__(
            message=(
                f"No factory registered with key {key}. "
                f"Available keys: {', '.join(self.known_keys) or 'none'}"
            ),
            context={"key": key, "known_keys": self.known_keys},
        )
