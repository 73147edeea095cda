"""
Main FastAPI application for the Event Planning Service.
Handles application startup, middleware, error mapping and routing.
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from eventplanning.api.router import router as api_router
from eventplanning.core.config import config
from eventplanning.core.errors import DomainError, ErrorCode
from eventplanning.core.logging_config import setup_logging
from eventplanning.db.database import db_manager
from eventplanning.schemas.common import HealthCheckResponse
from eventplanning.services.jwt_manager import jwt_manager
from eventplanning.services.user_service import user_service

SERVICE_NAME = "Event Planning Service"
VERSION = "1.0.0"

setup_logging(config.get_log_level(), "eventplanning")
logger = logging.getLogger(__name__)


def _error_body(error_code: str, message, status_code: int, details=None) -> dict:
    body = {
        "error_code": error_code,
        "error_message": message,
        "status_code": status_code,
        "timestamp": datetime.now().isoformat()
    }
    if details is not None:
        body["details"] = details
    return body


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info(f"Starting {SERVICE_NAME}...")
    owns_database = not db_manager.is_initialized

    try:
        if owns_database:
            db_manager.initialize(
                await config.get_database_url(),
                await config.get_database_config()
            )
            logger.info("Database manager initialized")

        db_manager.create_tables()

        await jwt_manager.initialize()
        logger.info("JWT manager initialized")

        admin = await config.get_admin_bootstrap()
        if admin:
            await user_service.ensure_admin(admin["username"], admin["email"], admin["password"])

        logger.info(f"{SERVICE_NAME} started successfully")

    except Exception as e:
        logger.error(f"Failed to start {SERVICE_NAME}: {e}")
        raise

    yield

    # Shutdown
    logger.info(f"Shutting down {SERVICE_NAME}...")
    if owns_database:
        db_manager.close()
        logger.info("Database connections closed")


# Create FastAPI application
app = FastAPI(
    title=SERVICE_NAME,
    description="Event planning backend: events, ticket inventory, bookings and payment review",
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add request processing time to response headers."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    """Map service-layer errors to their HTTP status."""
    logger.warning(f"{request.method} {request.url.path} rejected: {exc.code.value} - {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.code.value, exc.message, exc.status_code)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies and parameters are client errors."""
    logger.warning(f"{request.method} {request.url.path} failed validation")
    return JSONResponse(
        status_code=400,
        content=_error_body(
            ErrorCode.VALIDATION_ERROR.value,
            "Request validation failed",
            400,
            {"errors": jsonable_encoder(exc.errors())}
        )
    )


@app.exception_handler(IntegrityError)
async def integrity_exception_handler(request: Request, exc: IntegrityError):
    """Constraint violations that slipped past the service checks."""
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=409,
        content=_error_body(
            ErrorCode.BUSINESS_RULE_VIOLATION.value,
            "Request conflicts with existing data",
            409
        )
    )


# HTTP exception handler
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """HTTP exception handler for FastAPI HTTP exceptions."""
    logger.warning(f"HTTP exception: {exc.status_code} - {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body("HTTP_ERROR", exc.detail, exc.status_code),
        headers=getattr(exc, "headers", None)
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=_error_body(
            "INTERNAL_SERVER_ERROR",
            "An internal server error occurred",
            500,
            {"exception": str(exc)}
        )
    )


# Include API router
app.include_router(api_router)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with service information."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running",
        "endpoints": {
            "api": "/api",
            "health": "/health",
            "docs": "/docs",
            "redoc": "/redoc"
        }
    }


@app.get("/health", response_model=HealthCheckResponse)
async def health_check():
    """Liveness check with a database probe."""
    database_ok = db_manager.ping()
    return HealthCheckResponse(
        status="healthy" if database_ok else "unhealthy",
        service="eventplanning",
        database="healthy" if database_ok else "unhealthy",
        timestamp=datetime.now()
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "eventplanning.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
