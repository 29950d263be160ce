"""
Employees API — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Session-scoped:
    └── accounting_service: seeded accounts (argon2 hashing is slow-ish)

    Function-scoped:
    ├── sample_employees: 2 × QA, 2 × Development, no ids
    ├── map_service / sql_service: real backends on tmp_path
    ├── employees_service: parametrized over map and sqlite
    ├── admin_token / user_token: signed bearer tokens
    └── test_client: HTTPX AsyncClient bound to an app with an injected backend
"""

import os
import tempfile

# Override settings for testing BEFORE any application imports
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["EMPLOYEES_IMPL"] = "mock"
os.environ["DATA_DIR"] = tempfile.mkdtemp(prefix="employees_test_")
os.environ["JWT_SECRET"] = "test-secret-for-the-employees-api-suite"

from typing import List

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from employees_api.config import settings
from employees_api.schemas.employee import Employee
from employees_api.security import create_access_token
from employees_api.services.accounting import AccountingService
from employees_api.services.employees.memory import EmployeesServiceMap
from employees_api.services.employees.sql import EmployeesServiceSql
from employees_api.utils.file_storage import FileStorage


def make_employee(full_name: str, department: str, salary: int = 12000, **overrides) -> Employee:
    data = {
        "full_name": full_name,
        "avatar": "https://example.com/avatar.png",
        "department": department,
        "birth_date": "1990-04-12",
        "salary": salary,
    }
    data.update(overrides)
    return Employee(**data)


@pytest.fixture
def sample_employees() -> List[Employee]:
    """Four id-less employees: two in QA, two in Development."""
    return [
        make_employee("Alice Tester", "QA", 9000),
        make_employee("Bob Checker", "QA", 11000, birth_date="1985-07-30"),
        make_employee("Carol Coder", "Development", 25000),
        make_employee("Dan Hacker", "Development", 31000, birth_date="1979-12-01"),
    ]


# ══════════════════════════════════════════════════════════════════════════
# Backends
# ══════════════════════════════════════════════════════════════════════════

async def _open_backend(kind: str, tmp_path):
    if kind == "map":
        service = EmployeesServiceMap(FileStorage(str(tmp_path / "data"), "employees.json"))
        await service.load()
    else:
        service = EmployeesServiceSql(
            f"sqlite+aiosqlite:///{tmp_path / 'employees.sqlite'}", backend_name="sqlite"
        )
        await service.create_table()
    return service


@pytest_asyncio.fixture
async def map_service(tmp_path):
    service = await _open_backend("map", tmp_path)
    yield service
    if not service.closed:
        await service.save()


@pytest_asyncio.fixture
async def sql_service(tmp_path):
    service = await _open_backend("sqlite", tmp_path)
    yield service
    if not service.closed:
        await service.save()


@pytest_asyncio.fixture(params=["map", "sqlite"])
async def employees_service(request, tmp_path):
    """The same contract tests run against every local backend."""
    service = await _open_backend(request.param, tmp_path)
    yield service
    if not service.closed:
        await service.save()


# ══════════════════════════════════════════════════════════════════════════
# Auth and HTTP client
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture(scope="session")
def accounting_service() -> AccountingService:
    return AccountingService.from_settings(settings)


@pytest.fixture
def admin_token() -> str:
    return create_access_token(settings.admin_username, "ADMIN")


@pytest.fixture
def user_token() -> str:
    return create_access_token(settings.user_username, "USER")


@pytest.fixture
def admin_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def user_headers(user_token):
    return {"Authorization": f"Bearer {user_token}"}


@pytest_asyncio.fixture
async def test_client(map_service, accounting_service):
    """
    HTTPX AsyncClient talking to an app that uses `map_service`.

    ASGITransport does not run the lifespan, so the injected backend is
    used as-is and released by the map_service fixture.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from employees_api.main import create_app

    app = create_app(employees_service=map_service, accounting_service=accounting_service)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def new_employee() -> Employee:
    """A single id-less employee, valid for both the backends and the API."""
    return make_employee("Eve Auditor", "Audit", 15000, birth_date="1992-02-29")


@pytest.fixture
def employee_payload() -> dict:
    """POST /employees body in wire (camelCase) format."""
    return {
        "fullName": "Frank Manager",
        "avatar": "https://example.com/frank.png",
        "department": "Management",
        "birthDate": "1980-03-15",
        "salary": 30000,
    }
