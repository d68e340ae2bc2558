"""Middleware components for the polytenant FastAPI integration.

Re-exports the middleware classes and key helper functions for convenience.
"""

from polytenant.infra.fastapi.middleware.tenant_binding import (
    CORRELATION_ID_HEADER,
    RequestSignals,
    TenantBindingMiddleware,
    accept_correlation_id,
)

__all__ = [
    "CORRELATION_ID_HEADER",
    "RequestSignals",
    "TenantBindingMiddleware",
    "accept_correlation_id",
]
