"""
Employees API — Backend Registry
=================================

What:  Maps a string key to an async factory that builds a ready backend.
How:   An explicit registry object is filled by bootstrap.build_registry()
       and asked once, at application startup, to resolve the configured key.
Who:   Used by the application lifespan and by tests.

Example:
    registry = BackendRegistry()
    registry.register("map", create_map_service)
    service = await registry.resolve("map", settings)
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from employees_api.exceptions import DuplicateRegistrationError, UnknownBackendError
from employees_api.services.employees.base import EmployeesService

logger = logging.getLogger(__name__)

# A factory receives the resolution dependencies (the Settings object) and
# returns a backend that is fully initialized once awaited.
BackendFactory = Callable[[Any], Awaitable[EmployeesService]]


class BackendRegistry:
    """
    Key → factory lookup table.

    Invariants:
        - a key is registered at most once (fail fast, never overwritten)
        - resolve() never returns a backend before its factory completed
    """

    def __init__(self) -> None:
        self._factories: Dict[str, BackendFactory] = {}

    def register(self, key: str, factory: BackendFactory) -> None:
        """
        Records `factory` under `key`.

        Raises:
            DuplicateRegistrationError: if `key` is already registered.
        """
        if key in self._factories:
            raise DuplicateRegistrationError(key)
        self._factories[key] = factory
        logger.debug("Registered employees backend '%s'", key)

    async def resolve(self, key: Optional[str], deps: Any = None) -> EmployeesService:
        """
        Builds the backend registered under `key`.

        Args:
            key:  registry key, e.g. "map" or "sqlite"
            deps: dependencies handed to the factory (the Settings object)

        Raises:
            UnknownBackendError: if nothing is registered under `key`; the
                error lists the known keys for diagnostics.
        """
        factory = self._factories.get(key) if key is not None else None
        if factory is None:
            raise UnknownBackendError(key, self.list_keys())

        logger.info("Resolving employees backend '%s'", key)
        service = await factory(deps)
        logger.info("Employees backend '%s' ready (%s)", key, type(service).__name__)
        return service

    def list_keys(self) -> List[str]:
        """All registered keys."""
        return list(self._factories)

    def __contains__(self, key: object) -> bool:
        return key in self._factories
