"""Installs tenant-specific capability implementations into a request context."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

    from polytenant.foundation.application.binding_registry import BindingRegistry
    from polytenant.foundation.application.capabilities import Capability
    from polytenant.foundation.application.context import RequestContext

logger = logging.getLogger(__name__)


class RequestScopedBinder:
    """Binds every capability for the tenant of a request or job.

    Runs before any capability-dependent code. Safe to run more than once
    per context: the tenant is memoized by the resolver and an existing
    instance is kept when its variant has not changed.

    Args:
        registry: Frozen binding registry.
        capabilities: Capabilities bound for every context, in order.
    """

    def __init__(
        self,
        registry: BindingRegistry,
        capabilities: Sequence[Capability[Any]],
    ) -> None:
        self._registry = registry
        self._capabilities = tuple(capabilities)

    @property
    def capabilities(self) -> tuple[Capability[Any], ...]:
        return self._capabilities

    def bind(self, context: RequestContext) -> None:
        """Resolve the tenant once and install a binding per capability."""
        tenant = context.resolver.current()

        for capability in self._capabilities:
            variant = self._registry.resolve(capability, tenant)
            if context.variant_for(capability) is variant:
                continue
            context.install(capability, variant, variant.create(tenant))

        if tenant is not None:
            context.publish_tenant(tenant)

        logger.debug(
            "capabilities_bound",
            extra={
                "tenant_id": str(tenant) if tenant is not None else None,
                "correlation_id": context.correlation_id,
                "capabilities": [c.name for c in self._capabilities],
            },
        )
