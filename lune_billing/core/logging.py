"""
Structured logging configuration for the Lune Billing Service
Provides structured logging with request IDs and error tracking
"""
import logging
import sys
import uuid
from typing import Any, Dict

import structlog
from fastapi import Request

from .config import settings


def add_severity_level(logger: Any, name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add severity level for cloud logging."""
    event_dict["severity"] = event_dict.get("level", "info").upper()
    return event_dict


def configure_logging() -> None:
    """Configure structured logging."""

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            add_severity_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if settings.log_format == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
    )


def get_logger(name: str = None) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance."""
    return structlog.get_logger(name)


def bind_request_id(request: Request) -> str:
    """Bind the request ID for the current request context."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)
    return request_id


def log_request(method: str, path: str, **kwargs: Any) -> None:
    """Log incoming request."""
    get_logger("lune.request").info(
        "Request received",
        method=method,
        path=path,
        **kwargs
    )


def log_response(status_code: int, duration_ms: float, **kwargs: Any) -> None:
    """Log outgoing response."""
    get_logger("lune.response").info(
        "Response sent",
        status_code=status_code,
        duration_ms=round(duration_ms, 2),
        **kwargs
    )


def log_error(error: Exception, context: str = "", **kwargs: Any) -> None:
    """Log errors with full context."""
    get_logger("lune.error").error(
        "Error occurred",
        error_type=type(error).__name__,
        error_message=str(error),
        context=context,
        **kwargs
    )
