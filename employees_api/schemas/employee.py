"""
Employees API — Employee Schemas
=================================

What:  Pydantic models for the employee record and the API payloads that create
       or patch it.
How:   Python attributes are snake_case; the wire format and persisted
       documents/rows use camelCase aliases (fullName, birthDate).

Models:
    Employee        — the domain record every backend stores and returns.
                      Carries no business validation: backends accept whatever
                      the HTTP layer has already validated.
    EmployeeCreate  — POST /employees body (all fields required, id optional)
    EmployeeUpdate  — PATCH /employees/{id} body (every field optional, no id)

Validation bounds (departments, salary range, birth-date range) are read from
settings at validation time, so environment overrides apply without re-import.
"""

import uuid
from datetime import date
from typing import Any, Dict, Optional

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    TypeAdapter,
    field_validator,
)
from pydantic.alias_generators import to_camel

from employees_api.config import settings

_http_url = TypeAdapter(AnyHttpUrl)


class Employee(BaseModel):
    """
    What:  A stored employee record.
    Who:   Returned by every EmployeesService operation and by the API.

    Example (wire format):
        {"id": "8c1f...", "fullName": "John Doe", "avatar": "https://example.com/a.jpg",
         "department": "QA", "birthDate": "1990-01-01", "salary": 12000}
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[str] = Field(default=None, description="Unique identifier, generated when absent")
    full_name: str = Field(description="Employee full name")
    avatar: str = Field(default="", description="Avatar image URL")
    department: str = Field(description="Department name")
    birth_date: str = Field(description="Birth date (ISO 8601)")
    salary: int = Field(description="Monthly salary")

    def to_document(self) -> Dict[str, Any]:
        """Aliased dict used by the JSON file and document-store backends."""
        return self.model_dump(by_alias=True)


# ══════════════════════════════════════════════════════════════════════════
# Field Validators — shared by the create and update payloads
# ══════════════════════════════════════════════════════════════════════════


def _check_uuid(value: str) -> str:
    try:
        uuid.UUID(value)
    except ValueError:
        raise ValueError("id must be a valid UUID")
    return value


def _check_avatar(value: str) -> str:
    if value is None:
        return value
    try:
        _http_url.validate_python(value)
    except ValueError:
        raise ValueError("Avatar must be a valid URL")
    return value


def _check_department(value: str) -> str:
    if value is None:
        return value
    departments = settings.departments_list
    if value not in departments:
        raise ValueError(f"Department must be one of: {', '.join(departments)}")
    return value


def _check_birth_date(value: str) -> str:
    if value is None:
        return value
    low, high = settings.min_birth_date, settings.max_birth_date
    message = f"Birth date must be between {low.isoformat()} and {high.isoformat()} (ISO format)"
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        raise ValueError(message)
    if not low <= parsed <= high:
        raise ValueError(message)
    return parsed.isoformat()


def _check_salary(value: int) -> int:
    if value is None:
        return value
    if value < settings.min_salary:
        raise ValueError(f"Salary must be greater than {settings.min_salary}")
    if value > settings.max_salary:
        raise ValueError(f"Salary must be less than {settings.max_salary}")
    return value


class EmployeeCreate(BaseModel):
    """
    What:  Request body for POST /employees.
    Rules: optional UUID id, fullName ≥ 2 chars, avatar http(s) URL,
           department from the allowed set, birthDate within the age window,
           integer salary within bounds. Unknown fields are rejected.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    id: Optional[str] = None
    full_name: str = Field(min_length=2)
    avatar: str
    department: str
    birth_date: str
    salary: StrictInt

    @field_validator("id")
    @classmethod
    def check_id(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _check_uuid(v)

    check_avatar = field_validator("avatar")(_check_avatar)
    check_department = field_validator("department")(_check_department)
    check_birth_date = field_validator("birth_date")(_check_birth_date)
    check_salary = field_validator("salary")(_check_salary)

    def to_employee(self) -> Employee:
        return Employee(**self.model_dump())


class EmployeeUpdate(BaseModel):
    """
    What:  Request body for PATCH /employees/{id}.
    How:   Only fields present in the body are applied (exclude_unset). The id
           is immutable, so it is not part of this schema and is rejected as
           an unknown field. Explicit nulls are rejected.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    full_name: Optional[str] = Field(default=None, min_length=2)
    avatar: Optional[str] = None
    department: Optional[str] = None
    birth_date: Optional[str] = None
    salary: Optional[StrictInt] = None

    @field_validator("full_name", "avatar", "department", "birth_date", "salary")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("Field may be omitted but not null")
        return v

    check_avatar = field_validator("avatar")(_check_avatar)
    check_department = field_validator("department")(_check_department)
    check_birth_date = field_validator("birth_date")(_check_birth_date)
    check_salary = field_validator("salary")(_check_salary)

    def changes(self) -> Dict[str, Any]:
        """Fields the client actually sent, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)
