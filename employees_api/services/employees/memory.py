"""
Employees API — Map Backend
============================

What:  In-memory dictionary of employees persisted to a JSON file.
How:   The file is loaded once by the factory; every mutation marks the store
       dirty; save() writes the file only when something changed.
Who:   Registered under the "map" key (the default backend).

Concurrency:
    Mutations and the final flush hold one asyncio.Lock, so a write never
    interleaves with the snapshot taken by save(). Mutations check the closed
    flag under that lock; one still waiting when the flush starts raises
    BackendClosedError instead of writing to a store that is already gone.
"""

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from employees_api.exceptions import AlreadyExistsError, FileStorageError, NotFoundError
from employees_api.schemas.employee import Employee
from employees_api.services.employees.base import (
    EmployeesService,
    changes_without_id,
    new_employee_id,
)
from employees_api.utils.file_storage import FileStorage

logger = logging.getLogger(__name__)


class EmployeesServiceMap(EmployeesService):
    """Dictionary keyed by employee id, flushed to a FileStorage on save()."""

    def __init__(self, storage: FileStorage, backend_name: str = "map"):
        super().__init__(backend_name)
        self._storage = storage
        self._employees: Dict[str, Employee] = {}
        self._is_updated = False
        self._lock = asyncio.Lock()

    @property
    def is_updated(self) -> bool:
        """True when the store holds changes not yet written to the file."""
        return self._is_updated

    async def load(self) -> None:
        """
        Fills the store from the data file. Records without an id are skipped.

        Raises:
            FileStorageError: an element is not an object, or a record with an
                id fails validation. The store stays empty.
        """
        documents = await self._storage.load_employees()
        self._fill(documents)

    def _fill(self, documents: Iterable[Any]) -> None:
        self._employees.clear()
        loaded: Dict[str, Employee] = {}
        for index, doc in enumerate(documents):
            if not isinstance(doc, Mapping):
                raise FileStorageError(
                    message="Employee data file contains an invalid record",
                    context={"index": index, "type": type(doc).__name__},
                )
            if not doc.get("id"):
                logger.warning("Skipping employee record without id: %s", doc.get("fullName"))
                continue
            try:
                employee = Employee.model_validate(doc)
            except PydanticValidationError as e:
                logger.error("Employee record %s in the data file is invalid: %s", doc.get("id"), e)
                raise FileStorageError(
                    message="Employee data file contains an invalid record",
                    context={"index": index, "id": doc.get("id"), "error": str(e)},
                ) from e
            loaded[employee.id] = employee
        self._employees.update(loaded)
        self._is_updated = False

    def to_documents(self) -> List[Dict[str, Any]]:
        """Current store as the JSON-ready list written to the data file."""
        return [employee.to_document() for employee in self._employees.values()]

    def _find(self, employee_id: str) -> Employee:
        employee = self._employees.get(employee_id)
        if employee is None:
            raise NotFoundError(employee_id)
        return employee

    # ── Queries ───────────────────────────────────────────────────────────

    async def get_all(self, department: Optional[str] = None) -> List[Employee]:
        self._ensure_open("get_all")
        employees = self._employees.values()
        if department:
            employees = [e for e in employees if e.department == department]
        return [e.model_copy() for e in employees]

    async def get_employee(self, employee_id: str) -> Employee:
        self._ensure_open("get_employee")
        return self._find(employee_id).model_copy()

    # ── Mutations ─────────────────────────────────────────────────────────

    async def add_employee(self, employee: Employee) -> Employee:
        employee_id = employee.id or new_employee_id()
        async with self._lock:
            self._ensure_open("add_employee")
            if employee_id in self._employees:
                raise AlreadyExistsError(employee_id)
            stored = employee.model_copy(update={"id": employee_id})
            self._employees[employee_id] = stored
            self._is_updated = True
        logger.debug("Added employee %s", employee_id)
        return stored.model_copy()

    async def update_employee(self, employee_id: str, changes: Mapping[str, Any]) -> Employee:
        fields = changes_without_id(changes)
        async with self._lock:
            self._ensure_open("update_employee")
            updated = self._find(employee_id).model_copy(update=fields)
            self._employees[employee_id] = updated
            self._is_updated = True
        return updated.model_copy()

    async def delete_employee(self, employee_id: str) -> Employee:
        async with self._lock:
            self._ensure_open("delete_employee")
            removed = self._find(employee_id)
            del self._employees[employee_id]
            self._is_updated = True
        logger.debug("Deleted employee %s", employee_id)
        return removed

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def _release(self) -> None:
        async with self._lock:
            # Mutations queued on the lock must see the store as closed
            self._closed = True
            written = await self._storage.save_employees(self.to_documents(), self._is_updated)
            if written:
                self._is_updated = False
            self._employees.clear()


async def create_map_service(config) -> EmployeesServiceMap:
    """Registry factory for the "map" key: builds the file store and loads it."""
    storage = FileStorage(config.data_dir, config.data_file_name, config.file_encoding)
    service = EmployeesServiceMap(storage)
    await service.load()
    return service
