"""Polytenant Infra FastAPI: app factory, tenant binding middleware, error handlers."""

from polytenant.foundation.application.context import (
    NoRequestContextError,
    RequestContext,
    clear_request_context,
    get_capability,
    get_current_context,
    get_current_correlation_id,
    get_current_tenant_id,
    set_request_context,
)
from polytenant.infra.fastapi.app_factory import create_app
from polytenant.infra.fastapi.dependencies import (
    require_principal,
    require_tenant,
    use_capability,
)
from polytenant.infra.fastapi.error_handlers import (
    ProblemDetail,
    register_exception_handlers,
)
from polytenant.infra.fastapi.health_service import (
    DefaultHealthService,
    WayneEntHealthService,
)
from polytenant.infra.fastapi.middleware.tenant_binding import (
    RequestSignals,
    TenantBindingMiddleware,
)
from polytenant.infra.fastapi.settings import AppSettings, CORSSettings, HealthSettings

__all__ = [
    "AppSettings",
    "CORSSettings",
    "DefaultHealthService",
    "HealthSettings",
    "NoRequestContextError",
    "ProblemDetail",
    "RequestContext",
    "RequestSignals",
    "TenantBindingMiddleware",
    "WayneEntHealthService",
    "clear_request_context",
    "create_app",
    "get_capability",
    "get_current_context",
    "get_current_correlation_id",
    "get_current_tenant_id",
    "register_exception_handlers",
    "require_principal",
    "require_tenant",
    "set_request_context",
    "use_capability",
]
