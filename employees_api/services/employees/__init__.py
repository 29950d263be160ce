"""
Employees API — Employee Storage Backends
==========================================

    base.py       — EmployeesService contract and shared helpers
    registry.py   — BackendRegistry (key → async factory)
    bootstrap.py  — registers the built-in backends, resolves the active one
    memory.py     — "map": dict + JSON file
    sql.py        — "sqlite": SQLAlchemy async
    mongo.py      — "mongo" / "mongoInMemory": PyMongo async
    mock.py       — "mock": stores nothing
"""

from employees_api.services.employees.base import EmployeesService
from employees_api.services.employees.registry import BackendRegistry

__all__ = ["BackendRegistry", "EmployeesService"]
