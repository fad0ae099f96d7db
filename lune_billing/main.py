"""Main FastAPI application for the Lune Billing Service."""

import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.database import db_manager
from .core.errors import LuneBillingError
from .core.logging import (
    bind_request_id,
    configure_logging,
    get_logger,
    log_error,
    log_request,
    log_response,
)
from .models.schemas import ErrorResponse, ValidationErrorResponse

# Configure logging
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""

    logger.info("Starting Lune Billing Service", environment=settings.environment)
    await db_manager.initialize()
    try:
        yield
    finally:
        logger.info("Shutting down Lune Billing Service")
        await db_manager.close()


# Create FastAPI application
app = FastAPI(
    title=settings.api_title,
    description=settings.api_description,
    version=settings.api_version,
    docs_url=settings.docs_url,
    redoc_url=settings.redoc_url,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_origins,
    allow_credentials=settings.allow_credentials,
    allow_methods=settings.allow_methods,
    allow_headers=settings.allow_headers,
)


def _request_id(request: Request):
    return getattr(request.state, "request_id", None)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    """Logging middleware for requests and responses."""

    request_id = bind_request_id(request)
    request.state.request_id = request_id
    start_time = time.perf_counter()

    log_request(
        method=request.method,
        path=request.url.path,
        query_params=str(request.query_params),
        client_ip=request.client.host if request.client else "",
    )

    try:
        response = await call_next(request)
    except Exception as e:
        log_error(e, "Unhandled error in request", duration_ms=(time.perf_counter() - start_time) * 1000)
        raise
    finally:
        structlog.contextvars.unbind_contextvars("request_id")

    log_response(
        status_code=response.status_code,
        duration_ms=(time.perf_counter() - start_time) * 1000,
        request_id=request_id,
    )
    response.headers["X-Request-ID"] = request_id
    return response


# Exception handlers
@app.exception_handler(LuneBillingError)
async def domain_exception_handler(request: Request, exc: LuneBillingError):
    """Render service errors with their stable status codes."""

    logger.warning(
        "Request failed",
        request_id=_request_id(request),
        error_type=type(exc).__name__,
        error_message=str(exc),
        status_code=exc.status_code,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.title,
            message=exc.public_message,
            request_id=_request_id(request),
            timestamp=_now(),
        ).model_dump(mode="json"),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors."""

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ValidationErrorResponse(
            error="Validation Error",
            message="Invalid request data",
            details=[
                {
                    "field": ".".join(str(x) for x in error["loc"]),
                    "message": error["msg"],
                    "type": error["type"],
                }
                for error in exc.errors()
            ],
            request_id=_request_id(request),
            timestamp=_now(),
        ).model_dump(mode="json"),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions."""

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=f"HTTP {exc.status_code}",
            message=str(exc.detail),
            request_id=_request_id(request),
            timestamp=_now(),
        ).model_dump(mode="json"),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""

    logger.error(
        "Unhandled exception",
        request_id=_request_id(request),
        error_type=type(exc).__name__,
        error_message=str(exc),
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="Internal Server Error",
            message="An unexpected error occurred",
            request_id=_request_id(request),
            timestamp=_now(),
        ).model_dump(mode="json"),
    )


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with service information."""
    return {
        "service": settings.service_name,
        "version": settings.service_version,
        "description": "Dental office usage tracking and monthly Lune invoicing",
        "docs_url": settings.docs_url,
        "health_check": "/health/live",
        "readiness_check": "/health/ready",
        "environment": settings.environment,
    }


# Include routers
from .api.v1 import health, invoices, machines, offices, usage  # noqa: E402

app.include_router(health.router, prefix="/health", tags=["Health"])
app.include_router(offices.router, prefix="/api/v1/offices", tags=["Offices"])
app.include_router(machines.router, prefix="/api/v1/machines", tags=["Machines"])
app.include_router(usage.router, prefix="/api/v1/usage", tags=["Usage"])
app.include_router(invoices.router, prefix="/api/v1/invoices", tags=["Invoices"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "lune_billing.main:app",
        host=settings.service_host,
        port=settings.service_port,
        reload=settings.debug,
        log_config=None,  # Use our custom logging
    )
