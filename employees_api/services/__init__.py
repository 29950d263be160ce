"""
Employees API — Services Layer
===============================

What:  Business logic between the routes (HTTP) and the storage backends.

Service Inventory:
    - employees/: EmployeesService contract, backend registry and backends
    - AccountingService: seeded accounts, login and token issuing
"""
