"""Request context management for tenant-scoped work.

A :class:`RequestContext` is created for every inbound request or background
job. It owns the tenant resolver for that unit of work (and therefore the
memoized tenant decision) plus the capability bindings installed by the
binder. The active context is exposed through a ContextVar, so each asyncio
task sees only its own context and nothing is shared between concurrent
requests.

Principal context: A separate ContextVar for the authenticated principal,
set by whatever authenticates the request upstream. Tenant resolution reads
it lazily through the request's signal source.

Usage:
    # In handlers/services
    from polytenant.foundation.application.context import get_capability
    from polytenant.foundation.application.capabilities import ORDERS

    orders = get_capability(ORDERS)  # Raises if no context or not bound

    # Read the published tenant without holding a resolver
    from polytenant.foundation.application.context import get_current_tenant_id

    tenant = get_current_tenant_id()  # None when no tenant was resolved
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from contextvars import Token

    from polytenant.foundation.application.binding_registry import Variant
    from polytenant.foundation.application.capabilities import Capability
    from polytenant.foundation.application.tenant_resolver import TenantResolver
    from polytenant.foundation.domain.identifiers import TenantId
    from polytenant.foundation.domain.principal import Principal

T = TypeVar("T")


@dataclass(slots=True)
class _Binding:
    variant: Variant
    instance: Any


@dataclass(slots=True, eq=False)
class RequestContext:
    """Mutable per-request (or per-job) scope.

    Only the binder installs bindings or publishes the tenant. Everything
    else reads.

    Attributes:
        resolver: Tenant resolver for this unit of work.
        correlation_id: Unique ID for distributed tracing.
        published_tenant: Tenant published by the binder, None until bound
            or when no tenant was resolved.
    """

    resolver: TenantResolver
    correlation_id: str
    published_tenant: TenantId | None = None
    _bindings: dict[str, _Binding] = field(default_factory=dict, repr=False)

    @property
    def tenant(self) -> TenantId | None:
        """The memoized tenant decision for this context."""
        return self.resolver.current()

    def install(self, capability: Capability[Any], variant: Variant, instance: Any) -> None:
        """Bind ``instance`` (built from ``variant``) for ``capability``."""
        self._bindings[capability.name] = _Binding(variant=variant, instance=instance)

    def publish_tenant(self, tenant: TenantId) -> None:
        """Make ``tenant`` readable via :func:`get_current_tenant_id`."""
        self.published_tenant = tenant

    def variant_for(self, capability: Capability[Any]) -> Variant | None:
        """Return the variant currently bound for ``capability``, if any."""
        binding = self._bindings.get(capability.name)
        return binding.variant if binding is not None else None

    def get(self, capability: Capability[T]) -> T:
        """Return the bound implementation of ``capability``.

        Raises:
            UnboundCapabilityError: If the binder has not installed it.
        """
        binding = self._bindings.get(capability.name)
        if binding is None:
            raise UnboundCapabilityError(capability.name)
        instance: T = binding.instance
        return instance

    def bound_capabilities(self) -> tuple[str, ...]:
        """Names of all capabilities bound in this context."""
        return tuple(self._bindings)


# ContextVar for request-scoped data - None when no request is active
request_context: ContextVar[RequestContext | None] = ContextVar("request_context", default=None)


class NoRequestContextError(RuntimeError):
    """Raised when request context is accessed outside of a request."""

    def __init__(self) -> None:
        super().__init__(
            "No request context available. "
            "Ensure this code runs inside a request with the tenant binding "
            "middleware, or inside TenancyRuntime.job_scope()."
        )


class UnboundCapabilityError(RuntimeError):
    """Raised when a capability is read before the binder installed it."""

    def __init__(self, capability: str) -> None:
        self.capability = capability
        super().__init__(f"Capability '{capability}' is not bound in the current context")


def get_current_context() -> RequestContext:
    """Get the current request context.

    Returns:
        The active RequestContext.

    Raises:
        NoRequestContextError: If called outside of a request context.
    """
    ctx = request_context.get()
    if ctx is None:
        raise NoRequestContextError()
    return ctx


def get_optional_context() -> RequestContext | None:
    """Get the current request context, or None outside a request."""
    return request_context.get()


def get_current_tenant_id() -> TenantId | None:
    """Get the tenant published for the current request.

    Returns:
        The published tenant, or None when no tenant was resolved or
        when called outside of a request context.
    """
    ctx = request_context.get()
    if ctx is None:
        return None
    return ctx.published_tenant


def get_current_correlation_id() -> str:
    """Get the current correlation ID for distributed tracing.

    Raises:
        NoRequestContextError: If called outside of a request context.
    """
    return get_current_context().correlation_id


def get_capability(capability: Capability[T]) -> T:
    """Get the implementation of ``capability`` bound for this request.

    Raises:
        NoRequestContextError: If called outside of a request context.
        UnboundCapabilityError: If the capability was not bound.
    """
    return get_current_context().get(capability)


def set_request_context(ctx: RequestContext) -> Token[RequestContext | None]:
    """Activate ``ctx`` for the current async task.

    Returns:
        Token for resetting the context via :func:`clear_request_context`.
    """
    return request_context.set(ctx)


def clear_request_context(token: Token[RequestContext | None]) -> None:
    """Reset the request context using the provided token.

    Args:
        token: The token returned from set_request_context.
    """
    request_context.reset(token)


# ---------------------------------------------------------------------------
# Principal context
# ---------------------------------------------------------------------------
# Separate ContextVar for the authenticated principal, owned by the upstream
# authentication layer.

_principal_context: ContextVar[Principal | None] = ContextVar("principal_context", default=None)


def set_principal_context(principal: Principal) -> Token[Principal | None]:
    """Set the authenticated principal for the current request.

    Args:
        principal: Authenticated principal.

    Returns:
        Token for resetting the context.
    """
    return _principal_context.set(principal)


def clear_principal_context(token: Token[Principal | None]) -> None:
    """Reset the principal context using the provided token."""
    _principal_context.reset(token)


def get_current_principal() -> Principal:
    """Get the authenticated principal from request context.

    Raises:
        NoRequestContextError: If called outside authenticated request.
    """
    principal = _principal_context.get()
    if principal is None:
        raise NoRequestContextError()
    return principal


def get_optional_principal() -> Principal | None:
    """Get the authenticated principal if available, or None."""
    return _principal_context.get()
