"""
Employees API — MongoDB Backend
================================

What:  Employees stored as documents in a MongoDB collection.
How:   PyMongo's native asyncio client. Initialization pings the server
       (retried with tenacity), then creates a unique index on `id` and a
       hashed index on `department`. Queries project `_id` away so documents
       read back exactly as they were written.
Who:   Registered under two keys:
         "mongo"          — external server at MONGO_URI
         "mongoInMemory"  — ephemeral mongod started for this process only

Release order for the in-memory variant:
    client.close() first, then the owned mongod is stopped. The server is
    stopped even when closing the client fails.
"""

import asyncio
import logging
from typing import Any, List, Mapping, Optional

from pymongo import ASCENDING, HASHED, AsyncMongoClient, ReturnDocument
from pymongo.errors import ConnectionFailure, DuplicateKeyError, PyMongoError
from pymongo_inmemory import Mongod
from pymongo_inmemory.context import Context
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from employees_api.exceptions import AlreadyExistsError, DatabaseError, NotFoundError
from employees_api.schemas.employee import Employee
from employees_api.services.employees.base import (
    EmployeesService,
    changes_without_id,
    new_employee_id,
    to_aliases,
)

logger = logging.getLogger(__name__)

# Stored documents never expose Mongo's own `_id`
PROJECTION = {"_id": 0}


def _wrap(operation: str, error: PyMongoError) -> DatabaseError:
    logger.error("MongoDB %s failed: %s", operation, error)
    return DatabaseError(context={"operation": operation, "error": str(error)})


class InMemoryMongoServer:
    """
    A throwaway mongod process (pymongo-inmemory).

    Building a Mongod downloads the binary on first use, so construction,
    start and stop all run in a worker thread to keep the event loop free.
    The library reads its own PYMONGOIM__* environment (version, port, a
    local binary) through Context.
    """

    def __init__(self) -> None:
        self._mongod: Optional[Mongod] = None

    @staticmethod
    def _launch() -> Mongod:
        mongod = Mongod(Context())
        mongod.start()
        return mongod

    async def start(self) -> str:
        """Starts mongod and returns its connection string."""
        self._mongod = await asyncio.to_thread(self._launch)
        logger.info("In-memory mongod started at %s", self._mongod.connection_string)
        return self._mongod.connection_string

    async def stop(self) -> None:
        if self._mongod is None:
            return
        mongod, self._mongod = self._mongod, None
        await asyncio.to_thread(mongod.stop)
        logger.info("In-memory mongod stopped")


class EmployeesServiceMongo(EmployeesService):
    """
    Document backend over one collection.

    Args:
        client:       connected AsyncMongoClient, closed by save()
        collection:   the employees collection on that client
        backend_name: registry key the backend was resolved under
        server:       optional owned mongod, stopped by save() after the client
        connect_attempts: ping attempts before init gives up
    """

    def __init__(
        self,
        client: Any,
        collection: Any,
        backend_name: str = "mongo",
        server: Optional[InMemoryMongoServer] = None,
        connect_attempts: int = 3,
    ):
        super().__init__(backend_name)
        self._client = client
        self._collection = collection
        self._server = server
        self._connect_attempts = connect_attempts

    async def _ping(self) -> None:
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(ConnectionFailure),
            stop=stop_after_attempt(self._connect_attempts),
            wait=wait_exponential_jitter(initial=0.5, max=5),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                await self._client.admin.command("ping")

    async def init(self) -> None:
        """Verifies connectivity and creates the collection indexes."""
        try:
            await self._ping()
            await self._collection.create_index([("id", ASCENDING)], unique=True)
            await self._collection.create_index([("department", HASHED)])
        except PyMongoError as e:
            raise _wrap("init", e) from e

    # ── Queries ───────────────────────────────────────────────────────────

    async def get_all(self, department: Optional[str] = None) -> List[Employee]:
        self._ensure_open("get_all")
        query = {"department": department} if department else {}
        try:
            documents = await self._collection.find(query, PROJECTION).to_list(length=None)
        except PyMongoError as e:
            raise _wrap("get_all", e) from e
        return [Employee.model_validate(doc) for doc in documents]

    async def get_employee(self, employee_id: str) -> Employee:
        self._ensure_open("get_employee")
        try:
            document = await self._collection.find_one({"id": employee_id}, PROJECTION)
        except PyMongoError as e:
            raise _wrap("get_employee", e) from e
        if document is None:
            raise NotFoundError(employee_id)
        return Employee.model_validate(document)

    # ── Mutations ─────────────────────────────────────────────────────────

    async def add_employee(self, employee: Employee) -> Employee:
        self._ensure_open("add_employee")
        stored = employee.model_copy(update={"id": employee.id or new_employee_id()})
        try:
            # insert_one adds `_id` to the dict it is given
            await self._collection.insert_one(stored.to_document())
        except DuplicateKeyError as e:
            raise AlreadyExistsError(stored.id) from e
        except PyMongoError as e:
            raise _wrap("add_employee", e) from e
        logger.debug("Added employee %s", stored.id)
        return stored

    async def update_employee(self, employee_id: str, changes: Mapping[str, Any]) -> Employee:
        self._ensure_open("update_employee")
        fields = changes_without_id(changes)
        if not fields:
            return await self.get_employee(employee_id)
        try:
            document = await self._collection.find_one_and_update(
                {"id": employee_id},
                {"$set": to_aliases(fields)},
                projection=PROJECTION,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise _wrap("update_employee", e) from e
        if document is None:
            raise NotFoundError(employee_id)
        return Employee.model_validate(document)

    async def delete_employee(self, employee_id: str) -> Employee:
        self._ensure_open("delete_employee")
        try:
            document = await self._collection.find_one_and_delete(
                {"id": employee_id}, projection=PROJECTION
            )
        except PyMongoError as e:
            raise _wrap("delete_employee", e) from e
        if document is None:
            raise NotFoundError(employee_id)
        logger.debug("Deleted employee %s", employee_id)
        return Employee.model_validate(document)

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def _release(self) -> None:
        try:
            await self._client.close()
        finally:
            if self._server is not None:
                await self._server.stop()


async def _connect(config, uri: str, backend_name: str, server=None) -> EmployeesServiceMongo:
    client = AsyncMongoClient(uri)
    collection = client.get_database(config.mongo_db_name).get_collection(
        config.mongo_collection_name
    )
    service = EmployeesServiceMongo(
        client, collection, backend_name, server, connect_attempts=config.mongo_connect_attempts
    )
    try:
        await service.init()
    except DatabaseError:
        await client.close()
        raise
    return service


async def create_mongo_service(config) -> EmployeesServiceMongo:
    """Registry factory for the "mongo" key: connects to MONGO_URI."""
    return await _connect(config, config.mongo_uri, "mongo")


async def create_mongo_in_memory_service(config) -> EmployeesServiceMongo:
    """Registry factory for the "mongoInMemory" key: starts a private mongod first."""
    server = InMemoryMongoServer()
    uri = await server.start()
    try:
        return await _connect(config, uri, "mongoInMemory", server)
    except DatabaseError:
        await server.stop()
        raise
