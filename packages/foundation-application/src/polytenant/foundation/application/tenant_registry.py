"""Closed set of tenants the deployment recognizes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from polytenant.foundation.domain.identifiers import TenantId, normalize_tenant_key

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class TenantRegistry:
    """Immutable set of known tenants with case-insensitive membership.

    Canonical spellings are kept so resolved tenants come back in the
    casing the deployment configured (``"wayneent"`` resolves to
    ``TenantId("WayneEnt")``).

    Example:
        >>> registry = TenantRegistry(["AcMe", "Beta"])
        >>> registry.is_known("ACME")
        True
        >>> registry.canonicalize("beta")
        TenantId(value='Beta')
    """

    __slots__ = ("_by_key",)

    def __init__(self, tenants: Iterable[str | TenantId] = ()) -> None:
        by_key: dict[str, TenantId] = {}
        for raw in tenants:
            tenant = raw if isinstance(raw, TenantId) else TenantId(raw)
            # First spelling wins for duplicates differing only by case
            by_key.setdefault(tenant.key, tenant)
        self._by_key = by_key

    def is_known(self, candidate: str | TenantId | None) -> bool:
        """Return True when ``candidate`` names a known tenant.

        None, empty and whitespace-only candidates are never known.
        """
        return self.canonicalize(candidate) is not None

    def canonicalize(self, candidate: str | TenantId | None) -> TenantId | None:
        """Return the configured spelling of ``candidate``, or None if unknown."""
        if candidate is None:
            return None
        raw = candidate.value if isinstance(candidate, TenantId) else candidate
        key = normalize_tenant_key(raw)
        if not key:
            return None
        return self._by_key.get(key)

    def __contains__(self, candidate: object) -> bool:
        if candidate is None or isinstance(candidate, (str, TenantId)):
            return self.is_known(candidate)
        return False

    def __iter__(self) -> Iterator[TenantId]:
        return iter(self._by_key.values())

    def __len__(self) -> int:
        return len(self._by_key)

    def __repr__(self) -> str:
        names = ", ".join(repr(t.value) for t in self)
        return f"TenantRegistry([{names}])"
