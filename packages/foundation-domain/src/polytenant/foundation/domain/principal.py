"""Principal value object representing an authenticated identity.

Pure domain object with no external dependencies. Immutable (frozen dataclass).
Built by whatever authenticates the request upstream; tenancy only reads the
principal's organization memberships.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(frozen=True, slots=True)
class OrganizationRef:
    """An organization the principal belongs to.

    Attributes:
        id: Persistence identifier. Lower ids were created first.
        slug: Organization slug, used as a tenant candidate.
        name: Display name.
    """

    id: int
    slug: str
    name: str = ""


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated entity performing a request.

    Attributes:
        subject: Unique principal identifier from the identity provider.
        user_id: Application user id.
        email: Contact email. None if unknown.
        roles: Role strings. Empty tuple if absent.
        organizations: Organization memberships in any order.
    """

    subject: str
    user_id: UUID
    email: str | None = None
    roles: tuple[str, ...] = ()
    organizations: tuple[OrganizationRef, ...] = ()

    def primary_organization(self) -> OrganizationRef | None:
        """Return the membership with the lowest organization id.

        Returns:
            The first organization by id, or None without memberships.
        """
        if not self.organizations:
            return None
        return min(self.organizations, key=lambda org: org.id)
