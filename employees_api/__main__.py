"""
Employees API — Command Line Entry Point
=========================================

Usage:
    python -m employees_api [BACKEND]

    BACKEND is a registry key (map, sqlite, mongo, mongoInMemory, mock);
    without it EMPLOYEES_IMPL decides, and "map" is the default.
"""

import argparse

import uvicorn

from employees_api.config import settings
from employees_api.main import create_app
from employees_api.services.employees.bootstrap import select_backend_key


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(prog="employees_api", description="Run the Employees API server.")
    parser.add_argument("backend", nargs="?", help="Employees backend key (default: EMPLOYEES_IMPL)")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    args = parser.parse_args(argv)

    key = select_backend_key([args.backend] if args.backend else [], settings)
    uvicorn.run(create_app(backend_key=key), host=args.host, port=args.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
