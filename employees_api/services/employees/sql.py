"""
Employees API — SQL Backend
============================

What:  Employees stored in a relational table through async SQLAlchemy.
How:   The backend owns its engine and session factory. Each operation opens
       a short-lived session; the factory creates the table (and its
       department index) before the backend is handed out.
Who:   Registered under the "sqlite" key (aiosqlite driver, file database).

Error Handling:
    - Unknown id → NotFoundError, taken id → AlreadyExistsError
    - A primary-key race that slips past the pre-check surfaces as an
      IntegrityError and is reported as AlreadyExistsError as well
    - Other SQLAlchemy errors are wrapped in DatabaseError (500); the driver
      message is logged, never returned to the client
"""

import logging
from typing import Any, List, Mapping, Optional

from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from employees_api.database import build_engine, build_session_factory, create_tables
from employees_api.exceptions import (
    AlreadyExistsError,
    DatabaseError,
    EmployeesApiError,
    NotFoundError,
)
from employees_api.models.employee import EmployeeRecord
from employees_api.schemas.employee import Employee
from employees_api.services.employees.base import (
    EmployeesService,
    changes_without_id,
    new_employee_id,
)

logger = logging.getLogger(__name__)


def _by_id(employee_id: str) -> Select:
    return select(EmployeeRecord).where(EmployeeRecord.id == employee_id)


def _wrap(operation: str, error: SQLAlchemyError) -> DatabaseError:
    logger.error("SQL %s failed: %s", operation, error)
    return DatabaseError(context={"operation": operation, "error": str(error)})


class EmployeesServiceSql(EmployeesService):
    """Relational backend; one row per employee in the `employees` table."""

    def __init__(self, database_url: str, echo: bool = False, backend_name: str = "sql"):
        super().__init__(backend_name)
        self._engine = build_engine(database_url, echo)
        self._session_factory = build_session_factory(self._engine)

    async def create_table(self) -> None:
        """Creates the employees table and its index when they do not exist."""
        try:
            await create_tables(self._engine)
        except SQLAlchemyError as e:
            raise _wrap("create_table", e) from e

    # ── Queries ───────────────────────────────────────────────────────────

    async def get_all(self, department: Optional[str] = None) -> List[Employee]:
        self._ensure_open("get_all")
        stmt = select(EmployeeRecord)
        if department:
            stmt = stmt.where(EmployeeRecord.department == department)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return [record.to_employee() for record in result.scalars().all()]
        except SQLAlchemyError as e:
            raise _wrap("get_all", e) from e

    async def get_employee(self, employee_id: str) -> Employee:
        self._ensure_open("get_employee")
        try:
            async with self._session_factory() as session:
                record = (await session.execute(_by_id(employee_id))).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise _wrap("get_employee", e) from e
        if record is None:
            raise NotFoundError(employee_id)
        return record.to_employee()

    # ── Mutations ─────────────────────────────────────────────────────────

    async def add_employee(self, employee: Employee) -> Employee:
        self._ensure_open("add_employee")
        employee_id = employee.id or new_employee_id()
        stored = employee.model_copy(update={"id": employee_id})
        try:
            async with self._session_factory() as session:
                existing = (await session.execute(_by_id(employee_id))).scalar_one_or_none()
                if existing is not None:
                    raise AlreadyExistsError(employee_id)
                session.add(EmployeeRecord.from_employee(stored))
                try:
                    await session.commit()
                except IntegrityError as e:
                    await session.rollback()
                    if (await session.execute(_by_id(employee_id))).scalar_one_or_none():
                        raise AlreadyExistsError(employee_id) from e
                    raise
        except EmployeesApiError:
            raise
        except SQLAlchemyError as e:
            raise _wrap("add_employee", e) from e
        logger.debug("Added employee %s", employee_id)
        return stored

    async def update_employee(self, employee_id: str, changes: Mapping[str, Any]) -> Employee:
        self._ensure_open("update_employee")
        fields = changes_without_id(changes)
        try:
            async with self._session_factory() as session:
                record = (await session.execute(_by_id(employee_id))).scalar_one_or_none()
                if record is None:
                    raise NotFoundError(employee_id)
                if fields:
                    for name, value in fields.items():
                        setattr(record, name, value)
                    await session.commit()
                return record.to_employee()
        except EmployeesApiError:
            raise
        except SQLAlchemyError as e:
            raise _wrap("update_employee", e) from e

    async def delete_employee(self, employee_id: str) -> Employee:
        self._ensure_open("delete_employee")
        try:
            async with self._session_factory() as session:
                record = (await session.execute(_by_id(employee_id))).scalar_one_or_none()
                if record is None:
                    raise NotFoundError(employee_id)
                removed = record.to_employee()
                await session.delete(record)
                await session.commit()
        except EmployeesApiError:
            raise
        except SQLAlchemyError as e:
            raise _wrap("delete_employee", e) from e
        logger.debug("Deleted employee %s", employee_id)
        return removed

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def _release(self) -> None:
        await self._engine.dispose()


async def create_sqlite_service(config) -> EmployeesServiceSql:
    """Registry factory for the "sqlite" key: opens the database and creates the table."""
    service = EmployeesServiceSql(config.sqlite_url, echo=config.sql_echo, backend_name="sqlite")
    await service.create_table()
    logger.info("SQLite employees table ready (%s)", config.sqlite_url)
    return service
