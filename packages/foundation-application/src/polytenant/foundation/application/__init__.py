"""Polytenant Foundation Application: tenant resolution and capability binding."""

from polytenant.foundation.application.binder import RequestScopedBinder
from polytenant.foundation.application.binding_registry import BindingRegistry, Variant
from polytenant.foundation.application.capabilities import (
    BUILTIN_CAPABILITIES,
    HEALTH,
    NOTIFICATIONS,
    ORDERS,
    Capability,
)
from polytenant.foundation.application.context import (
    NoRequestContextError,
    RequestContext,
    UnboundCapabilityError,
    clear_principal_context,
    clear_request_context,
    get_capability,
    get_current_context,
    get_current_correlation_id,
    get_current_principal,
    get_current_tenant_id,
    get_optional_context,
    get_optional_principal,
    set_principal_context,
    set_request_context,
)
from polytenant.foundation.application.contributions import (
    ErrorHandlerContribution,
    LifespanContribution,
    MiddlewareContribution,
    VariantContribution,
)
from polytenant.foundation.application.discovery import (
    DiscoveredContribution,
    discover,
    iter_contributions,
)
from polytenant.foundation.application.runtime import (
    TenancyRuntime,
    build_runtime,
    get_tenancy_runtime,
)
from polytenant.foundation.application.settings import TenancySettings, get_tenancy_settings
from polytenant.foundation.application.tenant_registry import TenantRegistry
from polytenant.foundation.application.tenant_resolver import (
    StaticSignals,
    TenantResolution,
    TenantResolver,
    TenantSignalSource,
)

__all__ = [
    "BUILTIN_CAPABILITIES",
    "HEALTH",
    "NOTIFICATIONS",
    "ORDERS",
    "BindingRegistry",
    "Capability",
    "DiscoveredContribution",
    "ErrorHandlerContribution",
    "LifespanContribution",
    "MiddlewareContribution",
    "NoRequestContextError",
    "RequestContext",
    "RequestScopedBinder",
    "StaticSignals",
    "TenancyRuntime",
    "TenancySettings",
    "TenantRegistry",
    "TenantResolution",
    "TenantResolver",
    "TenantSignalSource",
    "UnboundCapabilityError",
    "Variant",
    "VariantContribution",
    "build_runtime",
    "clear_principal_context",
    "clear_request_context",
    "discover",
    "get_capability",
    "get_current_context",
    "get_current_correlation_id",
    "get_current_principal",
    "get_current_tenant_id",
    "get_optional_context",
    "get_optional_principal",
    "get_tenancy_runtime",
    "get_tenancy_settings",
    "iter_contributions",
    "set_principal_context",
    "set_request_context",
]
