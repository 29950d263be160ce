"""
Employees API — Backend Bootstrap
==================================

What:  Wires every backend factory into a registry and resolves the active one.
How:   build_registry() registers the factories explicitly; nothing registers
       itself as an import side effect. The key comes from the first CLI
       argument or EMPLOYEES_IMPL, and is consumed once at startup.
Who:   Called by the application lifespan and by `python -m employees_api`.

Keys:
    map            — dict in memory + JSON file (default)
    sqlite         — SQLAlchemy + aiosqlite
    mongo          — external MongoDB at MONGO_URI
    mongoInMemory  — ephemeral mongod owned by the process
    mock           — stores nothing
"""

import logging
from typing import Optional, Sequence

from employees_api.config import Settings, settings
from employees_api.services.employees.base import EmployeesService
from employees_api.services.employees.memory import create_map_service
from employees_api.services.employees.mock import create_mock_service
from employees_api.services.employees.mongo import (
    create_mongo_in_memory_service,
    create_mongo_service,
)
from employees_api.services.employees.registry import BackendRegistry
from employees_api.services.employees.sql import create_sqlite_service

logger = logging.getLogger(__name__)

MAP_KEY = "map"
SQLITE_KEY = "sqlite"
MONGO_KEY = "mongo"
MONGO_IN_MEMORY_KEY = "mongoInMemory"
MOCK_KEY = "mock"


def build_registry() -> BackendRegistry:
    """Returns a registry holding every built-in backend factory."""
    registry = BackendRegistry()
    registry.register(MAP_KEY, create_map_service)
    registry.register(SQLITE_KEY, create_sqlite_service)
    registry.register(MONGO_KEY, create_mongo_service)
    registry.register(MONGO_IN_MEMORY_KEY, create_mongo_in_memory_service)
    registry.register(MOCK_KEY, create_mock_service)
    return registry


def select_backend_key(argv: Sequence[str] = (), config: Optional[Settings] = None) -> str:
    """
    First positional argument wins; EMPLOYEES_IMPL is the fallback.

    Args:
        argv: program arguments without the program name
    """
    config = config or settings
    if argv and argv[0]:
        return argv[0]
    return config.employees_impl


async def create_employees_service(
    key: Optional[str] = None,
    registry: Optional[BackendRegistry] = None,
    config: Optional[Settings] = None,
) -> EmployeesService:
    """
    Resolves the backend for `key` (default: EMPLOYEES_IMPL).

    Raises:
        UnknownBackendError: `key` is not registered; startup must abort.
    """
    config = config or settings
    registry = registry or build_registry()
    return await registry.resolve(key or config.employees_impl, config)
