"""Tests for the Principal value object."""

from __future__ import annotations

from uuid import uuid4

import pytest

from polytenant.foundation.domain.principal import OrganizationRef, Principal


@pytest.mark.unit
class TestPrincipal:
    def test_defaults(self) -> None:
        principal = Principal(subject="user|1", user_id=uuid4())
        assert principal.email is None
        assert principal.roles == ()
        assert principal.organizations == ()

    def test_frozen(self) -> None:
        principal = Principal(subject="user|1", user_id=uuid4())
        with pytest.raises(AttributeError):
            principal.subject = "other"  # type: ignore[misc]


@pytest.mark.unit
class TestPrimaryOrganization:
    def test_none_without_memberships(self) -> None:
        principal = Principal(subject="user|1", user_id=uuid4())
        assert principal.primary_organization() is None

    def test_single_membership(self) -> None:
        org = OrganizationRef(id=3, slug="wayneent", name="Wayne Enterprises")
        principal = Principal(subject="user|1", user_id=uuid4(), organizations=(org,))
        assert principal.primary_organization() == org

    def test_lowest_id_wins_regardless_of_order(self) -> None:
        beta = OrganizationRef(id=2, slug="beta")
        acme = OrganizationRef(id=1, slug="acme")
        principal = Principal(subject="user|1", user_id=uuid4(), organizations=(beta, acme))
        primary = principal.primary_organization()
        assert primary is not None
        assert primary.slug == "acme"
