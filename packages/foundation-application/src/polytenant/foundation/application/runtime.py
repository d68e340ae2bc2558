"""Composition root for tenant resolution and capability binding.

:func:`build_runtime` runs once per process. It loads :class:`TenancySettings`,
builds the tenant registry, registers every discovered
:class:`VariantContribution`, and freezes the binding registry. A capability
without a Default variant raises here, before any traffic is served.

The HTTP middleware and the task middleware both open scopes through the
same runtime:

    runtime = build_runtime()

    with runtime.request_scope(signals) as ctx:
        orders = ctx.get(ORDERS)

    with runtime.job_scope("WayneEnt"):
        get_capability(HEALTH).get_status()
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from polytenant.foundation.application.binder import RequestScopedBinder
from polytenant.foundation.application.binding_registry import BindingRegistry
from polytenant.foundation.application.capabilities import BUILTIN_CAPABILITIES
from polytenant.foundation.application.context import (
    RequestContext,
    clear_request_context,
    set_request_context,
)
from polytenant.foundation.application.contributions import VariantContribution
from polytenant.foundation.application.discovery import iter_contributions
from polytenant.foundation.application.settings import TenancySettings
from polytenant.foundation.application.tenant_registry import TenantRegistry
from polytenant.foundation.application.tenant_resolver import (
    StaticSignals,
    TenantResolver,
    TenantSignalSource,
)
from polytenant.foundation.domain.exceptions import VariantConfigurationError
from polytenant.foundation.domain.identifiers import TenantId

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from polytenant.foundation.application.capabilities import Capability

logger = logging.getLogger(__name__)

VARIANT_GROUP = "polytenant.variants"


class TenancyRuntime:
    """Process-wide tenancy state, read-only once built.

    Attributes:
        tenant_registry: Known tenants.
        binding_registry: Frozen (capability, tenant) table.
        binder: Binder shared by every context.
        default_tenant: Configured fallback tenant, if any.
        tenant_header: Header carrying the explicit tenant signal.
    """

    def __init__(
        self,
        tenant_registry: TenantRegistry,
        binding_registry: BindingRegistry,
        capabilities: Sequence[Capability[Any]] = BUILTIN_CAPABILITIES,
        default_tenant: TenantId | str | None = None,
        tenant_header: str = "X-Tenant-ID",
    ) -> None:
        if isinstance(default_tenant, str):
            default_tenant = TenantId(default_tenant) if default_tenant.strip() else None
        self.tenant_registry = tenant_registry
        self.binding_registry = binding_registry
        self.binder = RequestScopedBinder(binding_registry, capabilities)
        self.default_tenant = default_tenant
        self.tenant_header = tenant_header

    @property
    def capabilities(self) -> tuple[Capability[Any], ...]:
        return self.binder.capabilities

    def new_resolver(self, signals: TenantSignalSource | None = None) -> TenantResolver:
        """Create a fresh resolver for one request or job."""
        return TenantResolver(self.tenant_registry, signals, self.default_tenant)

    def new_context(
        self,
        signals: TenantSignalSource | None = None,
        *,
        correlation_id: str | None = None,
    ) -> RequestContext:
        """Create a bound context for one request.

        The tenant is resolved and every capability is installed before
        this returns.
        """
        context = RequestContext(
            resolver=self.new_resolver(signals),
            correlation_id=correlation_id or str(uuid4()),
        )
        self.binder.bind(context)
        return context

    @contextmanager
    def request_scope(
        self,
        signals: TenantSignalSource | None = None,
        *,
        correlation_id: str | None = None,
    ) -> Iterator[RequestContext]:
        """Activate a bound context for the duration of the block."""
        context = self.new_context(signals, correlation_id=correlation_id)
        token = set_request_context(context)
        try:
            yield context
        finally:
            clear_request_context(token)

    @contextmanager
    def job_scope(
        self,
        tenant: TenantId | str,
        *,
        correlation_id: str | None = None,
    ) -> Iterator[RequestContext]:
        """Activate a context for a background job running as ``tenant``.

        No request signals exist for jobs, so the tenant is set with
        :meth:`TenantResolver.override` before anything is bound.
        """
        resolver = self.new_resolver(StaticSignals())
        resolver.override(tenant)
        context = RequestContext(
            resolver=resolver,
            correlation_id=correlation_id or str(uuid4()),
        )
        self.binder.bind(context)
        token = set_request_context(context)
        try:
            yield context
        finally:
            clear_request_context(token)


def register_contributions(
    registry: BindingRegistry,
    contributions: Iterable[VariantContribution],
    capabilities: Sequence[Capability[Any]],
    tenant_registry: TenantRegistry | None = None,
) -> None:
    """Register variant contributions against ``capabilities``.

    Tenant variants for tenants missing from ``tenant_registry`` are skipped
    with a warning. Installed packages may ship variants for tenants this
    deployment does not serve.

    Raises:
        VariantConfigurationError: If a contribution names a capability
            that is not in ``capabilities``.
        DuplicateVariantError: If two contributions fill the same slot.
    """
    by_name = {capability.name: capability for capability in capabilities}
    for contribution in contributions:
        capability = by_name.get(contribution.capability)
        if capability is None:
            raise VariantConfigurationError(
                f"Variant contributed for unknown capability '{contribution.capability}'",
                context={"capability": contribution.capability},
            )
        if contribution.is_default:
            registry.register_default(capability, contribution.factory)
        elif tenant_registry is not None and not tenant_registry.is_known(contribution.tenant):
            logger.warning(
                "variant_skipped_unknown_tenant",
                extra={"capability": capability.name, "tenant_id": contribution.tenant},
            )
        else:
            registry.register(capability, contribution.tenant, contribution.factory)  # type: ignore[arg-type]


def build_runtime(
    settings: TenancySettings | None = None,
    *,
    variants: Iterable[VariantContribution] = (),
    capabilities: Sequence[Capability[Any]] = BUILTIN_CAPABILITIES,
    discover_variants: bool = True,
    exclude_names: frozenset[str] = frozenset(),
) -> TenancyRuntime:
    """Build and validate the tenancy runtime.

    Args:
        settings: Tenancy settings. Loaded from environment when omitted.
        variants: Extra contributions registered after discovered ones.
        capabilities: Capabilities bound for every context.
        discover_variants: Load contributions from the
            ``polytenant.variants`` entry point group.
        exclude_names: Entry point names to skip during discovery.

    Returns:
        A runtime with a frozen binding registry.

    Raises:
        UnknownVariantConfigurationError: If a capability has no Default.
        VariantConfigurationError: If a contribution is invalid.
    """
    if settings is None:
        settings = TenancySettings()

    tenant_registry = TenantRegistry(settings.known_tenants)
    binding_registry = BindingRegistry(tenant_registry)

    contributions: list[VariantContribution] = []
    if discover_variants:
        contributions.extend(
            iter_contributions(VARIANT_GROUP, VariantContribution, exclude_names=exclude_names)
        )
    contributions.extend(variants)

    register_contributions(binding_registry, contributions, capabilities, tenant_registry)
    binding_registry.freeze(capabilities)

    runtime = TenancyRuntime(
        tenant_registry,
        binding_registry,
        capabilities,
        default_tenant=settings.default_tenant,
        tenant_header=settings.tenant_header,
    )
    logger.info(
        "tenancy_runtime_built",
        extra={
            "known_tenants": [str(t) for t in tenant_registry],
            "default_tenant": settings.default_tenant,
            "capabilities": [c.name for c in capabilities],
        },
    )
    return runtime


@lru_cache(maxsize=1)
def get_tenancy_runtime() -> TenancyRuntime:
    """Get the cached runtime for processes without an app (e.g., task workers)."""
    return build_runtime()
