"""FastAPI dependency factories for polytenant.

Expose the request's resolved tenant, its capability bindings and the
authenticated principal to endpoints.
"""

from polytenant.infra.fastapi.dependencies.capabilities import (
    require_principal,
    require_tenant,
    use_capability,
)

__all__ = [
    "require_principal",
    "require_tenant",
    "use_capability",
]
