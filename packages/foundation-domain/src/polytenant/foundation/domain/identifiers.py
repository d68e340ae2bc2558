"""Identifier value objects for type-safe identifier handling.

Example:
    >>> from polytenant.foundation.domain import TenantId
    >>> TenantId("AcMe") == TenantId("acme")
    True
"""

from __future__ import annotations

from dataclasses import dataclass


def normalize_tenant_key(raw: str) -> str:
    """Return the comparison key for a raw tenant string."""
    return raw.strip().lower()


@dataclass(frozen=True, eq=False)
class TenantId:
    """Case-insensitive tenant identifier.

    The original spelling is kept in ``value`` for display and logging.
    Equality and hashing use ``key`` (stripped, lower-cased), so
    ``TenantId("WayneEnt")`` and ``TenantId("wayneent")`` are the same tenant.

    Attributes:
        value: The identifier as supplied (surrounding whitespace removed).

    Raises:
        ValueError: If value is empty or whitespace-only.

    Example:
        >>> TenantId(" Beta ").value
        'Beta'
        >>> TenantId("Beta").key
        'beta'
    """

    value: str

    def __post_init__(self) -> None:
        """Strip surrounding whitespace and reject empty identifiers."""
        if not isinstance(self.value, str):
            msg = f"Tenant ID must be a string, got {type(self.value).__name__}"
            raise TypeError(msg)
        stripped = self.value.strip()
        if not stripped:
            msg = "Tenant ID cannot be empty"
            raise ValueError(msg)
        object.__setattr__(self, "value", stripped)

    @property
    def key(self) -> str:
        """Normalized form used for every comparison."""
        return normalize_tenant_key(self.value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TenantId):
            return self.key == other.key
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        """Return tenant ID string for serialization."""
        return self.value
