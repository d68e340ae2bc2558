"""Per-request tenant resolution.

Resolution waterfall (first accepted candidate wins):
  Step 1: Explicit tenant header, accepted only if known
  Step 2: Leftmost host label (3+ labels), accepted only if known
  Step 3: Slug of the principal's primary organization, accepted only if known
  Step 4: Configured default tenant, used verbatim without validation
  Otherwise: no tenant

The outcome is memoized on first use. Later changes to the underlying
signals (headers, host, principal) do not alter it. :meth:`TenantResolver.override`
is the only way to replace a memoized decision.

One resolver belongs to one request or job. Resolvers are never shared.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Protocol

from polytenant.foundation.domain.exceptions import NoTenantError
from polytenant.foundation.domain.identifiers import TenantId

if TYPE_CHECKING:
    from polytenant.foundation.application.tenant_registry import TenantRegistry
    from polytenant.foundation.domain.principal import Principal

logger = logging.getLogger(__name__)

ResolutionSource = Literal["explicit", "host", "principal", "default", "override", "none"]

# a.b.c is the shortest host whose first label is treated as a tenant
MIN_HOST_LABELS = 3


class TenantSignalSource(Protocol):
    """Read-only view of the request attributes used for tenant resolution.

    Signals are read lazily, at most once per resolver, and only when the
    waterfall reaches the corresponding step.
    """

    def explicit_tenant(self) -> str | None:
        """Value of the explicit tenant header, if present."""
        ...

    def host(self) -> str | None:
        """Request host name, optionally with a port."""
        ...

    def principal(self) -> Principal | None:
        """Authenticated principal, if any."""
        ...


@dataclass(slots=True)
class StaticSignals:
    """Signal source backed by plain attributes.

    Used for background jobs and tests. Attributes may be reassigned after
    construction, which is how tests demonstrate memoization.
    """

    explicit: str | None = None
    hostname: str | None = None
    user: Principal | None = None

    def explicit_tenant(self) -> str | None:
        return self.explicit

    def host(self) -> str | None:
        return self.hostname

    def principal(self) -> Principal | None:
        return self.user


@dataclass(frozen=True, slots=True)
class TenantResolution:
    """Outcome of tenant resolution.

    Attributes:
        tenant: Resolved tenant, or None when nothing matched.
        source: Which step of the waterfall produced the tenant.
    """

    tenant: TenantId | None
    source: ResolutionSource


def host_candidate(host: str | None) -> str | None:
    """Extract the tenant candidate from a host name.

    Args:
        host: Host name, optionally with ``:port``.

    Returns:
        The leftmost label when the host has at least three labels,
        otherwise None.

    Example:
        >>> host_candidate("acme.example.com:8000")
        'acme'
        >>> host_candidate("example.com") is None
        True
    """
    if not host:
        return None
    hostname = host.strip()
    if not hostname or hostname.startswith("["):
        # IPv6 literals never carry a tenant
        return None
    hostname = hostname.split(":", 1)[0]
    labels = hostname.split(".")
    if len(labels) < MIN_HOST_LABELS:
        return None
    return labels[0] or None


class TenantResolver:
    """Resolves and memoizes the tenant for a single request.

    Args:
        registry: Known tenants used to validate candidates.
        signals: Request attributes to read candidates from.
        default_tenant: Fallback used when no candidate is accepted.
    """

    def __init__(
        self,
        registry: TenantRegistry,
        signals: TenantSignalSource | None = None,
        default_tenant: TenantId | str | None = None,
    ) -> None:
        self._registry = registry
        self._signals: TenantSignalSource = signals if signals is not None else StaticSignals()
        if isinstance(default_tenant, str):
            default_tenant = TenantId(default_tenant) if default_tenant.strip() else None
        self._default = default_tenant
        self._resolution: TenantResolution | None = None

    @property
    def is_resolved(self) -> bool:
        """True once a decision has been memoized."""
        return self._resolution is not None

    def resolution(self) -> TenantResolution:
        """Return the memoized resolution, computing it on first call."""
        if self._resolution is None:
            self._resolution = self._resolve()
        return self._resolution

    def current(self) -> TenantId | None:
        """Return the tenant for this request, or None."""
        return self.resolution().tenant

    def required(self) -> TenantId:
        """Return the tenant for this request.

        Raises:
            NoTenantError: If no tenant could be resolved.
        """
        tenant = self.current()
        if tenant is None:
            raise NoTenantError()
        return tenant

    def override(self, tenant: TenantId | str) -> TenantId:
        """Force the tenant for the rest of this request.

        Overrides bypass the known-tenant check and replace any memoized
        decision.

        Returns:
            The tenant now in effect.
        """
        forced = tenant if isinstance(tenant, TenantId) else TenantId(tenant)
        previous = self._resolution
        if previous is not None and previous.source != "override":
            logger.warning(
                "tenant_override_after_resolution",
                extra={
                    "tenant_id": str(forced),
                    "previous_tenant_id": str(previous.tenant) if previous.tenant else None,
                    "previous_source": previous.source,
                },
            )
        self._resolution = TenantResolution(tenant=forced, source="override")
        return forced

    def _resolve(self) -> TenantResolution:
        # Step 1: Explicit header
        explicit = self._registry.canonicalize(self._signals.explicit_tenant())
        if explicit is not None:
            return self._accept(explicit, "explicit")

        # Step 2: Host name
        from_host = self._registry.canonicalize(host_candidate(self._signals.host()))
        if from_host is not None:
            return self._accept(from_host, "host")

        # Step 3: Principal's primary organization
        principal = self._signals.principal()
        if principal is not None:
            organization = principal.primary_organization()
            if organization is not None:
                from_principal = self._registry.canonicalize(organization.slug)
                if from_principal is not None:
                    return self._accept(from_principal, "principal")

        # Step 4: Configured default
        if self._default is not None:
            return self._accept(self._default, "default")

        logger.debug("tenant_unresolved")
        return TenantResolution(tenant=None, source="none")

    @staticmethod
    def _accept(tenant: TenantId, source: ResolutionSource) -> TenantResolution:
        logger.debug(
            "tenant_resolved",
            extra={"tenant_id": str(tenant), "source": source},
        )
        return TenantResolution(tenant=tenant, source=source)
