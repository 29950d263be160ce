"""
Employees API — Application Package Initializer
================================================

What: Marks the `employees_api` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The service follows a layered architecture:

    ┌─────────────────────────────────────┐
    │     Routes + Auth (API Layer)       │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Employees Service Facade          │  ← one backend, resolved at startup
    ├─────────────────────────────────────┤
    │   Backend Registry                  │  ← key → async factory
    ├─────────────────────────────────────┤
    │   Storage Backends                  │  ← map+JSON file, SQL, Mongo, mock
    └─────────────────────────────────────┘

    Routes never know which storage technology is active; they depend only on
    the EmployeesService contract.
"""

__version__ = "1.0.0"
