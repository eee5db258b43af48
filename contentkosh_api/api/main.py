from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from contentkosh_api.core.errors import ApiError
from contentkosh_api.core.logging import configure_logging, correlation_id_var
from contentkosh_api.core.settings import get_app_settings
from contentkosh_api.core.validation import format_validation_errors
from contentkosh_api.db.run_migrations import main as run_alembic
from contentkosh_api.db.seed import seed_all
from contentkosh_api.db.session import dispose_engine
from contentkosh_api.schemas.common import ApiResponse, ErrorInfo, ErrorResponse, ok

# Routers
from contentkosh_api.api.routes.announcements import router as announcements_router
from contentkosh_api.api.routes.auth import router as auth_router
from contentkosh_api.api.routes.batches import router as batches_router
from contentkosh_api.api.routes.business import router as business_router
from contentkosh_api.api.routes.content import router as content_router
from contentkosh_api.api.routes.courses import router as courses_router
from contentkosh_api.api.routes.permission import router as permission_router
from contentkosh_api.api.routes.teachers import router as teachers_router
from contentkosh_api.api.routes.users import router as users_router

settings = get_app_settings()

# Configure structured logging once at import
configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Liveness probe."},
    {"name": "Auth", "description": "Signup, login and token endpoints."},
    {"name": "Business", "description": "Businesses (tenants), their exams and users."},
    {"name": "Users", "description": "User administration endpoints."},
    {"name": "Courses", "description": "Courses of an exam and subjects of a course."},
    {"name": "Batches", "description": "Batches and batch memberships."},
    {"name": "Content", "description": "Batch content uploads and downloads."},
    {"name": "Permissions", "description": "Per-user permission grants."},
    {"name": "Teachers", "description": "Teacher profiles."},
    {"name": "Announcements", "description": "Business-wide announcements."},
]

app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    openapi_tags=openapi_tags,
)

# CORS - avoid wildcard with credentials
cors_allow_credentials = settings.CORS_ALLOW_CREDENTIALS
if settings.CORS_ORIGINS == ["*"] and cors_allow_credentials:
    logger.warning("CORS_ALLOW_CREDENTIALS=True with '*' origins is not permitted; disabling credentials.")
    cors_allow_credentials = False

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=cors_allow_credentials,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """
    Attach a correlation id to the request for logging and error responses.
    Adds 'X-Correlation-ID' to every response.
    """
    corr = request.headers.get("X-Correlation-ID") or request.headers.get("X-Request-ID") or str(uuid4())
    token_corr = correlation_id_var.set(corr)
    request.state.correlation_id = corr

    logger.info("Incoming request %s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
    finally:
        correlation_id_var.reset(token_corr)

    response.headers["X-Correlation-ID"] = corr
    return response


def _build_error_response(
    request: Request,
    status_code: int,
    error_type: str,
    message: str,
    details: Any | None = None,
) -> JSONResponse:
    """Build the standard error envelope (success=false)."""
    err = ErrorResponse(
        message=message,
        error=ErrorInfo(type=error_type, details=details),
        correlation_id=getattr(request.state, "correlation_id", None),
        path=request.url.path,
        timestamp=datetime.now(tz=timezone.utc),
    )
    return JSONResponse(status_code=status_code, content=err.model_dump(mode="json", by_alias=True))


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    """Typed errors raised by services and dependencies."""
    if exc.status_code >= 500:
        logger.error("API error on %s: %s", request.url.path, exc.message)
    return _build_error_response(request, exc.status_code, exc.error_type, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Global handler for HTTPException (including unknown routes and methods).
    """
    detail = exc.detail if isinstance(exc.detail, str) else "HTTP Error"
    return _build_error_response(
        request=request,
        status_code=exc.status_code,
        error_type="http_error",
        message=str(detail),
        details=None if isinstance(exc.detail, str) else exc.detail,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Request validation failures are client errors: 400 with the validator messages joined.
    """
    errors = exc.errors()
    return _build_error_response(
        request=request,
        status_code=400,
        error_type="validation_error",
        message=format_validation_errors(errors),
        details=[{"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")} for e in errors],
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler to avoid leaking stack traces and to return a structured error.
    """
    logger.exception("Unhandled error processing request")
    return _build_error_response(
        request=request,
        status_code=500,
        error_type="internal_error",
        message="An unexpected error occurred",
        details=None,
    )


@app.on_event("startup")
async def on_startup() -> None:
    """
    Run migrations and optional seeding on service startup.

    Alembic's env.py drives its own event loop, so migrations run in a worker thread.
    """
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        try:
            logger.info("Running Alembic migrations: upgrade head")
            await asyncio.to_thread(run_alembic, ["upgrade", "head"])
            logger.info("Migrations completed.")
        except Exception as exc:
            logger.exception("Migration step failed: %s", exc)
            # Do not crash the app in case of transient DB issues; rely on retries or later readiness probes.

    if settings.AUTO_SEED:
        try:
            logger.info("Running database seeding...")
            await seed_all(demo=settings.SEED_DEMO_DATA)
            logger.info("Seeding completed.")
        except Exception as exc:
            logger.exception("Seeding step failed: %s", exc)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await dispose_engine()


# PUBLIC_INTERFACE
@app.get(
    "/health",
    response_model=ApiResponse[dict],
    summary="Health Check",
    tags=["Health"],
)
def health_check() -> ApiResponse:
    """
    Basic liveness health check endpoint. No authentication.
    """
    return ok({"status": "ok", "timestamp": datetime.now(tz=timezone.utc).isoformat()}, "Healthy")


# Build the API router and include sub-routers
api = APIRouter(prefix="/api")
api.include_router(auth_router)
api.include_router(business_router)
api.include_router(users_router)
api.include_router(courses_router)
api.include_router(batches_router)
api.include_router(content_router)
api.include_router(permission_router)
api.include_router(teachers_router)
api.include_router(announcements_router)

app.include_router(api)
