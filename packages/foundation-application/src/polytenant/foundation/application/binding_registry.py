"""Startup-built table mapping (capability, tenant) to a variant.

Lookup:
  Tenant is None: Default variant
  Variant registered for (capability, tenant): that variant
  Otherwise: Default variant (expected for tenants without customization)

Registration happens once at process start. :meth:`BindingRegistry.freeze`
checks every capability has a Default and makes the table read-only, so a
missing Default aborts startup instead of failing a request.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from polytenant.foundation.domain.exceptions import (
    DuplicateVariantError,
    UnknownVariantConfigurationError,
    VariantConfigurationError,
)
from polytenant.foundation.domain.identifiers import TenantId

if TYPE_CHECKING:
    from collections.abc import Iterable

    from polytenant.foundation.application.capabilities import Capability
    from polytenant.foundation.application.tenant_registry import TenantRegistry

logger = logging.getLogger(__name__)

VariantFactory = Callable[[TenantId | None], Any]


@dataclass(frozen=True, slots=True)
class Variant:
    """One implementation of a capability.

    Attributes:
        capability: Capability name.
        factory: Builds the implementation for the resolved tenant.
        tenant: Owning tenant, None for the Default variant.
    """

    capability: str
    factory: VariantFactory
    tenant: TenantId | None = None

    @property
    def is_default(self) -> bool:
        return self.tenant is None

    def create(self, tenant: TenantId | None) -> Any:
        """Build an implementation for ``tenant``."""
        return self.factory(tenant)


class BindingRegistry:
    """Maps (capability, tenant) pairs to variants.

    Args:
        tenant_registry: When given, tenant variants may only be registered
            for known tenants.
    """

    def __init__(self, tenant_registry: TenantRegistry | None = None) -> None:
        self._tenants = tenant_registry
        self._defaults: dict[str, Variant] = {}
        self._overrides: dict[tuple[str, str], Variant] = {}
        self._frozen = False

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def register_default(self, capability: Capability[Any], factory: VariantFactory) -> Variant:
        """Register the Default variant for ``capability``.

        Raises:
            DuplicateVariantError: If a Default is already registered.
            VariantConfigurationError: If the registry is frozen.
        """
        self._check_open(capability)
        if capability.name in self._defaults:
            raise DuplicateVariantError(capability.name, None)
        variant = Variant(capability=capability.name, factory=factory)
        self._defaults[capability.name] = variant
        return variant

    def register(
        self,
        capability: Capability[Any],
        tenant: TenantId | str,
        factory: VariantFactory,
    ) -> Variant:
        """Register a tenant-specific variant for ``capability``.

        Raises:
            DuplicateVariantError: If the tenant already has a variant.
            VariantConfigurationError: If the tenant is unknown or the
                registry is frozen.
        """
        self._check_open(capability)
        tenant_id = tenant if isinstance(tenant, TenantId) else TenantId(tenant)
        if self._tenants is not None:
            canonical = self._tenants.canonicalize(tenant_id)
            if canonical is None:
                raise VariantConfigurationError(
                    f"Cannot register '{capability.name}' variant for unknown tenant "
                    f"'{tenant_id}'",
                    context={"capability": capability.name, "tenant": str(tenant_id)},
                )
            tenant_id = canonical
        slot = (capability.name, tenant_id.key)
        if slot in self._overrides:
            raise DuplicateVariantError(capability.name, str(tenant_id))
        variant = Variant(capability=capability.name, factory=factory, tenant=tenant_id)
        self._overrides[slot] = variant
        return variant

    def freeze(self, capabilities: Iterable[Capability[Any]]) -> None:
        """Validate Defaults and stop accepting registrations.

        Raises:
            UnknownVariantConfigurationError: If a capability has no Default.
        """
        for capability in capabilities:
            if capability.name not in self._defaults:
                raise UnknownVariantConfigurationError(capability.name)
        self._frozen = True
        logger.info(
            "binding_registry_frozen",
            extra={
                "defaults": sorted(self._defaults),
                "tenant_variants": len(self._overrides),
            },
        )

    def resolve(self, capability: Capability[Any], tenant: TenantId | None) -> Variant:
        """Return the variant to use for ``capability`` under ``tenant``.

        Raises:
            UnknownVariantConfigurationError: If no Default is registered.
        """
        if tenant is not None:
            variant = self._overrides.get((capability.name, tenant.key))
            if variant is not None:
                return variant

        default = self._defaults.get(capability.name)
        if default is None:
            raise UnknownVariantConfigurationError(capability.name)
        if tenant is not None:
            logger.debug(
                "variant_fallback",
                extra={"capability": capability.name, "tenant_id": str(tenant)},
            )
        return default

    def variants_for(self, capability: Capability[Any]) -> list[Variant]:
        """List registered variants for ``capability``, Default first."""
        variants: list[Variant] = []
        default = self._defaults.get(capability.name)
        if default is not None:
            variants.append(default)
        variants.extend(
            variant for (name, _), variant in self._overrides.items() if name == capability.name
        )
        return variants

    def _check_open(self, capability: Capability[Any]) -> None:
        if self._frozen:
            raise VariantConfigurationError(
                f"Binding registry is frozen; cannot register '{capability.name}'",
                context={"capability": capability.name},
            )
