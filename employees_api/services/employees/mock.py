"""
Employees API — Mock Backend
=============================

What:  A backend that stores nothing.
Who:   Registered under the "mock" key; lets the HTTP stack start without
       any storage, e.g. for smoke tests of routing and auth.

Every query returns an empty result. Lookups by id behave as if the store
were empty (NotFoundError); add echoes the record back with an id.
"""

from typing import Any, List, Mapping, Optional

from employees_api.exceptions import NotFoundError
from employees_api.schemas.employee import Employee
from employees_api.services.employees.base import EmployeesService, new_employee_id


class EmployeesServiceMock(EmployeesService):

    def __init__(self, backend_name: str = "mock"):
        super().__init__(backend_name)

    async def get_all(self, department: Optional[str] = None) -> List[Employee]:
        self._ensure_open("get_all")
        return []

    async def get_employee(self, employee_id: str) -> Employee:
        self._ensure_open("get_employee")
        raise NotFoundError(employee_id)

    async def add_employee(self, employee: Employee) -> Employee:
        self._ensure_open("add_employee")
        return employee.model_copy(update={"id": employee.id or new_employee_id()})

    async def update_employee(self, employee_id: str, changes: Mapping[str, Any]) -> Employee:
        self._ensure_open("update_employee")
        raise NotFoundError(employee_id)

    async def delete_employee(self, employee_id: str) -> Employee:
        self._ensure_open("delete_employee")
        raise NotFoundError(employee_id)

    async def _release(self) -> None:
        return None


async def create_mock_service(config) -> EmployeesServiceMock:
    return EmployeesServiceMock()
