"""
FastAPI application entry point.
Wires routers, middleware, exception handlers and the health endpoints.
"""

from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from homeswift.config import settings
from homeswift.database import get_db, check_database_connection, close_db_connection, utcnow
from homeswift.routers import (
    auth_router,
    properties_router,
    users_router,
    search_router,
    waitlist_router,
    catalog_router
)
from homeswift.utils.exceptions import APIException, ServiceUnavailableError
from homeswift.services.error_handler import ErrorHandlerService
from homeswift.middleware import ValidationMiddleware

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Checks the database on startup and disposes the engine on shutdown.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    if not await check_database_connection():
        logger.error("Failed to connect to database on startup; run `python migrate.py check-db` for diagnostics")

    if settings.catalog_backend == "supabase" and not settings.supabase_configured:
        logger.warning("CATALOG_BACKEND is 'supabase' but SUPABASE_URL or its key is missing")

    yield

    logger.info("Shutting down application")
    await close_db_connection()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Backend for the HomeSwift real-estate platform.

    ## Features

    * **Listings**: CRUD for properties with image galleries, owned by agents
    * **Search**: Filtered listing, page-numbered search, quick search and suggestions
    * **Accounts**: Email/password and Google sign-in, email verification, password reset
    * **Saved properties**: Users keep a list of favourite listings
    * **Waitlist**: Pre-launch signups
    * **Hosted catalog**: Listings served from Supabase or an in-memory store

    ## Authentication

    Obtain tokens from `/api/auth/login` and send `Authorization: Bearer <token>`.
    Logging in with `remember_me` also sets an httpOnly session cookie.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Authentication", "description": "Accounts, tokens and sign-in"},
        {"name": "Properties", "description": "Listing management and search"},
        {"name": "Users", "description": "Profiles, saved properties and user administration"},
        {"name": "Search", "description": "Quick search and autocomplete"},
        {"name": "Waitlist", "description": "Pre-launch waitlist"},
        {"name": "Catalog", "description": "Hosted listing catalog"},
        {"name": "Health", "description": "Service and database health"},
    ],
    lifespan=lifespan,
)

app.add_middleware(
    ValidationMiddleware,
    max_request_size=settings.max_request_size,
    enable_request_logging=settings.debug,
    enable_rate_limiting=settings.is_production,
    rate_limit_requests=settings.rate_limit_requests,
    rate_limit_window=settings.rate_limit_window,
    api_prefix=settings.api_prefix
)

# Added last so it wraps everything, including middleware error responses
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

app.include_router(auth_router, prefix=settings.api_prefix)
app.include_router(properties_router, prefix=settings.api_prefix)
app.include_router(users_router, prefix=settings.api_prefix)
app.include_router(search_router, prefix=settings.api_prefix)
app.include_router(waitlist_router, prefix=settings.api_prefix)
app.include_router(catalog_router, prefix=settings.api_prefix)


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    """Handle custom API exceptions with structured error responses."""
    return ErrorHandlerService.handle_api_exception(exc, request)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors with per-field details."""
    return ErrorHandlerService.handle_validation_error(exc, request)


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    return ErrorHandlerService.handle_database_error(exc, request)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Routing errors (404, 405) and plain HTTP exceptions."""
    return ErrorHandlerService.handle_http_exception(exc, request)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions without leaking internals."""
    return ErrorHandlerService.handle_unexpected_error(exc, request)


@app.get("/", tags=["Health"])
async def root():
    """Basic API information."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.environment,
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json"
        },
        "api_prefix": settings.api_prefix
    }


@app.get("/health", tags=["Health"])
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Health check with database connectivity test.
    Used by load balancers; answers 503 when the database is unreachable.
    """
    if not await check_database_connection(db):
        raise ServiceUnavailableError("Database connection failed")

    return {
        "status": "ok",
        "timestamp": utcnow().isoformat(),
        "environment": settings.environment,
        "version": settings.app_version,
        "database": "connected"
    }


@app.get("/health/db", tags=["Health"])
async def database_health_check(db: AsyncSession = Depends(get_db)):
    if not await check_database_connection(db):
        raise ServiceUnavailableError("Database connection failed")

    return {
        "status": "ok",
        "database": "connected",
        "database_url": settings.database_url.split("@")[1] if "@" in settings.database_url else "hidden"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "homeswift.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
