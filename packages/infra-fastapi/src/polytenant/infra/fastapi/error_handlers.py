"""RFC 7807 Problem Details exception handlers for FastAPI.

This module provides exception handlers that translate domain exceptions
into standardized HTTP responses following RFC 7807 Problem Details for
HTTP APIs. All handlers return responses with Content-Type: application/problem+json.

Usage:
    from polytenant.infra.fastapi.error_handlers import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from polytenant.foundation.application.context import get_optional_context
from polytenant.foundation.domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NoTenantError,
    NotFoundError,
    ValidationError,
)

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details response model.

    Standard fields:
    - type: URI reference identifying the problem type
    - title: Short human-readable summary
    - status: HTTP status code
    - detail: Human-readable explanation
    - instance: URI reference to specific occurrence

    Extension fields:
    - error_code: Machine-readable error code for client handling
    - context: Structured debugging information
    - correlation_id: Request correlation ID (5xx errors only)
    """

    type: str = Field(
        ...,
        description="URI reference identifying problem type",
        examples=["/errors/not-found", "/errors/no-tenant"],
    )
    title: str = Field(
        ...,
        description="Short human-readable summary",
        examples=["Resource Not Found", "Tenant Required"],
    )
    status: int = Field(
        ...,
        ge=400,
        le=599,
        description="HTTP status code",
    )
    detail: str = Field(
        ...,
        description="Human-readable explanation",
    )
    instance: str | None = Field(
        default=None,
        description="URI reference to specific occurrence (request path)",
    )
    error_code: str | None = Field(
        default=None,
        description="Machine-readable error code",
        examples=["RESOURCE_NOT_FOUND", "NO_TENANT"],
    )
    context: dict[str, Any] | None = Field(
        default=None,
        description="Structured debugging information",
    )
    correlation_id: str | None = Field(
        default=None,
        description="Request correlation ID for support requests",
    )


@dataclass(frozen=True, slots=True)
class _ProblemType:
    status: int
    type: str
    title: str


# Lookup walks the exception MRO, so subclasses inherit their parent's mapping
_DOMAIN_PROBLEMS: dict[type[DomainError], _ProblemType] = {
    AuthenticationError: _ProblemType(401, "/errors/unauthorized", "Unauthorized"),
    AuthorizationError: _ProblemType(403, "/errors/forbidden", "Forbidden"),
    NoTenantError: _ProblemType(400, "/errors/no-tenant", "Tenant Required"),
    NotFoundError: _ProblemType(404, "/errors/not-found", "Resource Not Found"),
    ValidationError: _ProblemType(422, "/errors/validation-error", "Validation Error"),
    DomainError: _ProblemType(400, "/errors/domain-error", "Bad Request"),
}

_SENSITIVE_KEYS = frozenset({"password", "secret", "token", "api_key", "apikey", "credential"})

_SENSITIVE_PATTERNS = [
    (re.compile(r"redis://[^@]*@[^/\s]*"), "redis://[REDACTED]@[REDACTED]"),
    (re.compile(r"password\s*=\s*['\"]?[^'\"\s]+['\"]?", re.IGNORECASE), "password=[REDACTED]"),
    (re.compile(r"secret\s*=\s*['\"]?[^'\"\s]+['\"]?", re.IGNORECASE), "secret=[REDACTED]"),
    (re.compile(r"token\s*=\s*['\"]?[^'\"\s]+['\"]?", re.IGNORECASE), "token=[REDACTED]"),
    (re.compile(r"api[_-]?key\s*=\s*['\"]?[^'\"\s]+['\"]?", re.IGNORECASE), "api_key=[REDACTED]"),
]


def _create_problem_response(problem: ProblemDetail) -> JSONResponse:
    """Create JSONResponse with RFC 7807 content type."""
    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(exclude_none=True),
        media_type=PROBLEM_MEDIA_TYPE,
    )


def _get_correlation_id(request: Request) -> str:
    """Get the correlation ID for the failing request.

    Prefers the active request context. The context is already cleared when
    the catch-all handler runs, so the copy the tenant binding middleware
    left in ``scope["state"]`` is used then.

    Returns:
        Correlation ID string, or "unknown" outside of a request.
    """
    context = get_optional_context()
    if context is not None:
        return context.correlation_id
    return request.scope.get("state", {}).get("correlation_id") or "unknown"


def _sanitize_context(context: dict[str, Any] | None) -> dict[str, Any] | None:
    """Make exception context safe to return to clients.

    Sensitive keys are dropped, UUIDs and datetimes become strings, and
    credentials embedded in string values are redacted.

    Returns:
        Sanitized context, or None if nothing is left.
    """
    if not context:
        return None
    sanitized = {
        key: _sanitize_value(value)
        for key, value in context.items()
        if not _is_sensitive_key(key)
    }
    return sanitized or None


def _is_sensitive_key(key: str) -> bool:
    return key.lower() in _SENSITIVE_KEYS


def _sanitize_value(value: Any) -> Any:
    """Sanitize a single value for JSON serialization."""
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, str):
        for pattern, replacement in _SENSITIVE_PATTERNS:
            value = pattern.sub(replacement, value)
        return value
    if isinstance(value, dict):
        return _sanitize_context(value)
    if isinstance(value, (list, tuple)):
        return [_sanitize_value(v) for v in value]
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


def _problem_type_for(exc: DomainError) -> _ProblemType:
    for cls in type(exc).__mro__:
        problem_type = _DOMAIN_PROBLEMS.get(cls)
        if problem_type is not None:
            return problem_type
    return _DOMAIN_PROBLEMS[DomainError]


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Translate a DomainError to its RFC 7807 response.

    Status, type and title come from the closest mapped class in the
    exception's hierarchy, so ``NoTenantError`` answers 400
    ``/errors/no-tenant`` and an unmapped subclass falls back to 400
    ``/errors/domain-error``. 401 responses carry a ``WWW-Authenticate``
    header (RFC 7235).
    """
    problem_type = _problem_type_for(exc)
    problem = ProblemDetail(
        type=problem_type.type,
        title=problem_type.title,
        status=problem_type.status,
        detail=exc.message,
        instance=str(request.url.path),
        error_code=exc.error_code,
        context=_sanitize_context(exc.context),
    )
    response = _create_problem_response(problem)
    if problem_type.status == 401:
        response.headers["WWW-Authenticate"] = 'Bearer realm="API"'
    return response


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Translate FastAPI request body, query and path validation errors to 422."""
    errors = [
        {
            "loc": list(error.get("loc", [])),
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    problem = ProblemDetail(
        type="/errors/request-validation-error",
        title="Request Validation Error",
        status=422,
        detail="Request validation failed",
        instance=str(request.url.path),
        error_code="REQUEST_VALIDATION_ERROR",
        context={"errors": errors},
    )
    return _create_problem_response(problem)


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Catch-all handler for unhandled exceptions.

    Logs the full exception but returns a sanitized body carrying the
    correlation ID. In debug mode the exception type and message are
    included.
    """
    correlation_id = _get_correlation_id(request)

    logger.exception(
        "unhandled_exception",
        extra={
            "correlation_id": correlation_id,
            "path": str(request.url.path),
            "method": request.method,
            "exception_type": type(exc).__name__,
        },
    )

    if getattr(request.app, "debug", False):
        detail = f"{type(exc).__name__}: {exc}"
        context: dict[str, Any] | None = {"exception_type": type(exc).__name__}
    else:
        detail = "An internal error occurred. Please contact support with the correlation ID."
        context = None

    problem = ProblemDetail(
        type="/errors/internal-error",
        title="Internal Server Error",
        status=500,
        detail=detail,
        instance=str(request.url.path),
        error_code="INTERNAL_ERROR",
        context=context,
        correlation_id=correlation_id,
    )
    return _create_problem_response(problem)


def register_exception_handlers(app: FastAPI) -> None:
    """Register the RFC 7807 handlers on ``app``.

    One handler serves every :class:`DomainError`. Starlette picks it for
    subclasses through the exception MRO.

    Example:
        >>> from fastapi import FastAPI
        >>> app = FastAPI()
        >>> register_exception_handlers(app)
    """
    # Type ignores needed due to Starlette's overly strict handler typing
    app.add_exception_handler(DomainError, domain_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError,
        request_validation_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(Exception, unhandled_exception_handler)
