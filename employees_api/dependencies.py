"""
Employees API — Request Dependencies
=====================================

What:  FastAPI dependencies for the active backend, the account store and
       role-based access control.
How:   Services live on `app.state` (set by create_app / the lifespan) and
       are handed to routes through Depends(); bearer tokens are read with
       HTTPBearer(auto_error=False) so a missing header maps to our own 401.

Usage:
    @router.post("", dependencies=[Depends(require_roles(Role.ADMIN))])
"""

from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from employees_api.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BackendUnavailableError,
)
from employees_api.schemas.auth import Principal, Role
from employees_api.security import decode_access_token
from employees_api.services.accounting import AccountingService
from employees_api.services.employees.base import EmployeesService

bearer_scheme = HTTPBearer(auto_error=False)


def get_employees_service(request: Request) -> EmployeesService:
    service = getattr(request.app.state, "employees_service", None)
    if service is None:
        raise BackendUnavailableError()
    return service


def get_accounting_service(request: Request) -> AccountingService:
    return request.app.state.accounting_service


def authenticate(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    """
    Resolves the caller from the `Authorization: Bearer <token>` header.

    Raises:
        AuthenticationError: header missing, not a bearer token, or the
            token fails verification.
    """
    if credentials is None:
        raise AuthenticationError(context={"reason": "missing bearer token"})
    claims = decode_access_token(credentials.credentials)
    return Principal(username=claims["sub"], role=claims["role"])


def require_roles(*roles: Role) -> Callable[[Principal], Principal]:
    """Dependency factory: only callers holding one of `roles` get through."""
    allowed = {role.value for role in roles}

    def checker(principal: Principal = Depends(authenticate)) -> Principal:
        if principal.role not in allowed:
            raise AuthorizationError(
                context={"username": principal.username, "role": principal.role}
            )
        return principal

    return checker
