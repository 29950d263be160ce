# Routes package init
"""
Employees API — Routes Package
===============================

Route Inventory:
    - auth.py:       POST   /login
    - employees.py:  GET    /employees?department=
                     GET    /employees/{id}
                     POST   /employees
                     PATCH  /employees/{id}
                     DELETE /employees/{id}
    - health.py:     GET    /health

Routes stay thin: parse the request, call the service, shape the response.
"""
