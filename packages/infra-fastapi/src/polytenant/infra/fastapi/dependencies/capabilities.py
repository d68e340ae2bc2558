"""FastAPI dependencies exposing the request's tenant and capability bindings.

Bindings are installed by ``TenantBindingMiddleware`` before the endpoint
runs. Handlers never construct capability implementations themselves.

Usage in endpoint::

    from polytenant.foundation.application.capabilities import ORDERS
    from polytenant.infra.fastapi.dependencies import use_capability

    @router.get("/orders")
    def list_orders(
        orders: Annotated[OrderCapability, Depends(use_capability(ORDERS))],
    ):
        ...
"""

# NOTE: Do NOT use ``from __future__ import annotations`` here.
# FastAPI dependency injection needs runtime-evaluable type annotations
# on the inner functions to resolve parameters.

from collections.abc import Callable
from typing import TypeVar

from polytenant.foundation.application.capabilities import Capability
from polytenant.foundation.application.context import (
    get_capability,
    get_current_context,
    get_optional_principal,
)
from polytenant.foundation.domain import AuthenticationError, Principal, TenantId

T = TypeVar("T")


def use_capability(capability: Capability[T]) -> Callable[[], T]:
    """Create a dependency returning the implementation bound for ``capability``.

    Args:
        capability: Capability descriptor (e.g., ``ORDERS``).

    Returns:
        FastAPI-compatible sync dependency function.
    """

    def _bound_capability() -> T:
        """Return the bound implementation.

        Raises:
            NoRequestContextError: If the tenant binding middleware did not run.
            UnboundCapabilityError: If the capability was not bound.
        """
        return get_capability(capability)

    _bound_capability.__qualname__ = f"use_capability({capability.name!r})._bound_capability"

    return _bound_capability


def require_tenant() -> TenantId:
    """Dependency returning the resolved tenant.

    Raises:
        NoTenantError: If no tenant could be resolved (-> 400).
    """
    return get_current_context().resolver.required()


def require_principal() -> Principal:
    """Dependency returning the authenticated principal.

    Raises:
        AuthenticationError: If no principal reached the request (-> 401).
    """
    principal = get_optional_principal()
    if principal is None:
        raise AuthenticationError("Authentication required")
    return principal
