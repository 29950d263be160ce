"""
Employees API — Storage Backend Contract
=========================================

What:  Abstract base class every employees backend implements.
How:   Concrete backends (map + JSON file, SQL, MongoDB, mock) implement the
       five CRUD coroutines and `_release()`; the base class owns the
       lifecycle flag that makes a closed backend unusable.
Who:   Routes depend on this interface only, never on a concrete backend.

Lifecycle:
    Unresolved → Constructing (factory) → Ready → Closed (after save())

    - No CRUD operation is legal after save(); it raises BackendClosedError.
    - save() releases owned resources at most once. A second call is logged
      and returns without touching the (already released) resources.

Errors:
    NotFoundError / AlreadyExistsError propagate unchanged. Infrastructure
    failures (lost connection, disk errors) propagate as-is and end up as 500.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

from employees_api.exceptions import BackendClosedError
from employees_api.schemas.employee import Employee

logger = logging.getLogger(__name__)

# Alias → attribute name, e.g. "fullName" → "full_name"
_FIELD_BY_ALIAS = {
    (info.alias or name): name for name, info in Employee.model_fields.items()
}


def new_employee_id() -> str:
    """Generates a random UUID4 string for a record added without an id."""
    return str(uuid.uuid4())


def changes_without_id(changes: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Normalizes a partial update to attribute names and drops `id`.

    Accepts both attribute names (full_name) and wire aliases (fullName).
    `id` is immutable once assigned, so it is never part of an update.

    Raises:
        ValueError: for a key that is not an Employee field.
    """
    normalized: Dict[str, Any] = {}
    for key, value in changes.items():
        name = key if key in Employee.model_fields else _FIELD_BY_ALIAS.get(key)
        if name is None:
            raise ValueError(f"Unknown employee field '{key}'")
        if name == "id":
            continue
        normalized[name] = value
    return normalized


def to_aliases(changes: Mapping[str, Any]) -> Dict[str, Any]:
    """Maps normalized attribute names to their stored (camelCase) names."""
    return {
        (Employee.model_fields[name].alias or name): value
        for name, value in changes.items()
    }


class EmployeesService(ABC):
    """
    Abstract interface for employee storage.

    Contract:
        - get_all(department) returns every record, or only those in the
          department; an unknown department yields an empty list
        - get_employee / update_employee / delete_employee raise
          NotFoundError(id) for an unknown id
        - add_employee generates an id when absent and raises
          AlreadyExistsError(id) when the id is taken
        - update_employee is a shallow merge of the provided fields
        - delete_employee returns the record as it was before deletion
        - save() flushes buffered state and releases owned resources

    Implementations:
        - EmployeesServiceMap: dict in memory, persisted to a JSON file
        - EmployeesServiceSql: SQLAlchemy async engine (SQLite by default)
        - EmployeesServiceMongo: MongoDB collection, optionally owning an
          ephemeral mongod process
        - EmployeesServiceMock: no-op test double
    """

    def __init__(self, backend_name: str):
        self.backend_name = backend_name
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self, operation: str) -> None:
        if self._closed:
            raise BackendClosedError(self.backend_name, operation)

    @abstractmethod
    async def get_all(self, department: Optional[str] = None) -> List[Employee]:
        """Returns all employees, filtered by department when one is given."""
        ...

    @abstractmethod
    async def get_employee(self, employee_id: str) -> Employee:
        """Returns one employee. Raises NotFoundError if absent."""
        ...

    @abstractmethod
    async def add_employee(self, employee: Employee) -> Employee:
        """Stores a new employee and returns it with its final id."""
        ...

    @abstractmethod
    async def update_employee(self, employee_id: str, changes: Mapping[str, Any]) -> Employee:
        """Merges `changes` into an existing employee and returns the full record."""
        ...

    @abstractmethod
    async def delete_employee(self, employee_id: str) -> Employee:
        """Removes an employee and returns the removed record."""
        ...

    @abstractmethod
    async def _release(self) -> None:
        """Flushes pending state and releases the backend's own resources."""
        ...

    async def save(self) -> None:
        """
        Flush and release, exactly once.

        The closed flag is set even when the release fails: resources are
        never released twice and the backend is never used again.
        """
        if self._closed:
            logger.warning("Employees backend '%s' already saved and closed", self.backend_name)
            return
        try:
            await self._release()
        finally:
            self._closed = True
        logger.info("Employees backend '%s' saved and closed", self.backend_name)
