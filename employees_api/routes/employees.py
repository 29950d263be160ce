"""
Employees API — Employee Route Handlers
========================================

What:  CRUD endpoints over the active employees backend.
How:   Bodies are validated by EmployeeCreate / EmployeeUpdate, the backend
       comes from get_employees_service, and access is checked before the
       body is looked at.

Access:
    GET               — USER, ADMIN
    POST/PATCH/DELETE — ADMIN only
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from employees_api.dependencies import get_employees_service, require_roles
from employees_api.schemas.auth import Principal, Role
from employees_api.schemas.common import ErrorResponse
from employees_api.schemas.employee import Employee, EmployeeCreate, EmployeeUpdate
from employees_api.services.employees.base import EmployeesService

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/employees", tags=["Employees"])

readers = require_roles(Role.USER, Role.ADMIN)
admins = require_roles(Role.ADMIN)

_auth_errors = {
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "Role not allowed", "model": ErrorResponse},
}
_not_found = {404: {"description": "Employee not found", "model": ErrorResponse}}


@router.get(
    "",
    response_model=List[Employee],
    responses=_auth_errors,
    summary="List employees",
)
async def get_all_employees(
    principal: Principal = Depends(readers),
    department: Optional[str] = Query(
        default=None,
        description="Only employees of this department; an unknown department yields []",
    ),
    service: EmployeesService = Depends(get_employees_service),
) -> List[Employee]:
    return await service.get_all(department)


@router.get(
    "/{employee_id}",
    response_model=Employee,
    responses={**_auth_errors, **_not_found},
    summary="Get one employee",
)
async def get_employee(
    principal: Principal = Depends(readers),
    employee_id: str = Path(description="Employee id"),
    service: EmployeesService = Depends(get_employees_service),
) -> Employee:
    return await service.get_employee(employee_id)


@router.post(
    "",
    response_model=Employee,
    status_code=status.HTTP_201_CREATED,
    responses={
        **_auth_errors,
        400: {"description": "Invalid employee", "model": ErrorResponse},
        409: {"description": "Id already taken", "model": ErrorResponse},
    },
    summary="Add an employee",
)
async def add_employee(
    body: EmployeeCreate,
    principal: Principal = Depends(admins),
    service: EmployeesService = Depends(get_employees_service),
) -> Employee:
    employee = await service.add_employee(body.to_employee())
    logger.info("Employee %s added by %s", employee.id, principal.username)
    return employee


@router.patch(
    "/{employee_id}",
    response_model=Employee,
    responses={
        **_auth_errors,
        **_not_found,
        400: {"description": "Invalid fields", "model": ErrorResponse},
    },
    summary="Update some fields of an employee",
)
async def update_employee(
    body: EmployeeUpdate,
    principal: Principal = Depends(admins),
    employee_id: str = Path(description="Employee id"),
    service: EmployeesService = Depends(get_employees_service),
) -> Employee:
    employee = await service.update_employee(employee_id, body.changes())
    logger.info("Employee %s updated by %s", employee_id, principal.username)
    return employee


@router.delete(
    "/{employee_id}",
    response_model=Employee,
    responses={**_auth_errors, **_not_found},
    summary="Delete an employee",
)
async def delete_employee(
    principal: Principal = Depends(admins),
    employee_id: str = Path(description="Employee id"),
    service: EmployeesService = Depends(get_employees_service),
) -> Employee:
    employee = await service.delete_employee(employee_id)
    logger.info("Employee %s deleted by %s", employee_id, principal.username)
    return employee
