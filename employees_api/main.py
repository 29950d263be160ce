"""
Employees API — FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance;
       the lifespan resolves the employees backend and releases it on exit.
Who:   Called by uvicorn (uvicorn employees_api.main:app), by
       `python -m employees_api`, and by tests with an injected backend.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────────────────┐  │
    │  │  Req ID  │→│  Logging    │→│  CORS            │  │
    │  └──────────┘ └─────────────┘ └──────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────┐ ┌──────────────────┐ ┌─────────────┐  │
    │  │POST login│ │ /employees CRUD  │ │ GET /health │  │
    │  └──────────┘ └──────────────────┘ └─────────────┘  │
    │                                                     │
    │  app.state:                                         │
    │    employees_service   — active backend             │
    │    accounting_service  — seeded accounts            │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (logged, not fatal)
    3. Resolve the backend for the configured key unless one was injected;
       an unknown key aborts startup

    Shutdown:
    1. Await save() on the backend (flush + release, exactly once)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from employees_api import __version__
from employees_api.config import settings
from employees_api.exceptions import EmployeesApiError
from employees_api.middleware.logging import RequestLoggingMiddleware
from employees_api.middleware.request_id import RequestIDMiddleware, request_id_var
from employees_api.routes import auth, employees, health
from employees_api.services.accounting import AccountingService
from employees_api.services.employees.base import EmployeesService
from employees_api.services.employees.bootstrap import build_registry

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configures the root logger once for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] employees_api.access: GET /employees 200 ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Employees API %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    service: Optional[EmployeesService] = app.state.employees_service
    if service is None:
        service = await build_registry().resolve(app.state.backend_key, settings)
        app.state.employees_service = service
    logger.info("Employees backend: %s", service.backend_name)
    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Employees API shutting down...")
    await service.save()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(
    error: str,
    name: str,
    message: str,
    status: int,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    body = {
        "error": error,
        "name": name,
        "message": message,
        "status": status,
        "request_id": request_id_var.get(""),
    }
    if details:
        body["details"] = details
    return body


def _describe_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    described = []
    for err in errors:
        # ("body", "salary") → "salary"; a whole-body error keeps "body"
        loc = [str(part) for part in err.get("loc", ())]
        field = ".".join(loc[1:]) if len(loc) > 1 else ".".join(loc)
        message = str(err.get("msg", "Invalid value")).removeprefix("Value error, ")
        described.append({"field": field, "message": message})
    return described


def register_exception_handlers(app: FastAPI) -> None:
    """
    Handler hierarchy:
        EmployeesApiError       → its own status_code / error_code
        RequestValidationError  → 400 Bad Request (FastAPI's default is 422)
        Exception (fallback)    → 500 Internal Server Error

    Responses never carry stack traces or the exception context; both are
    logged server-side.

    The fallback runs in Starlette's outermost error middleware, outside
    RequestIDMiddleware, so its body may carry an empty request_id. Known
    failure modes are raised as EmployeesApiError subclasses to keep the id.
    """

    @app.exception_handler(EmployeesApiError)
    async def handle_api_error(request: Request, exc: EmployeesApiError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, type(exc).__name__, exc.message, exc.status_code),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = _describe_validation_errors(exc.errors())
        first = errors[0] if errors else {"field": "", "message": "Invalid request"}
        message = f"{first['field']}: {first['message']}" if first["field"] else first["message"]
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), message)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", "ValidationError", message, 400, {"errors": errors}),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "InternalServerError",
                "An unexpected error occurred. Please try again or contact support.",
                500,
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    employees_service: Optional[EmployeesService] = None,
    backend_key: Optional[str] = None,
    accounting_service: Optional[AccountingService] = None,
) -> FastAPI:
    """
    Args:
        employees_service:  ready backend to use instead of resolving one
                            (tests); still released by the lifespan on exit
        backend_key:        registry key resolved at startup; defaults to
                            EMPLOYEES_IMPL
        accounting_service: account store; seeded from settings when omitted
    """
    app = FastAPI(
        title="Employees API",
        description="Employee records over a pluggable storage backend, with role-based access.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.employees_service = employees_service
    app.state.backend_key = backend_key or settings.employees_impl
    app.state.accounting_service = accounting_service or AccountingService.from_settings()

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware, threshold=settings.access_log_threshold)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(employees.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `employees_api.main:app` to be importable
app = create_app()
