"""Unit tests for polytenant.foundation.application.discovery."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from polytenant.foundation.application.contributions import VariantContribution
from polytenant.foundation.application.discovery import (
    DiscoveredContribution,
    discover,
    iter_contributions,
)


def _entry_point(name: str, value: object) -> MagicMock:
    ep = MagicMock()
    ep.name = name
    ep.load.return_value = value
    return ep


class TestDiscoveredContribution:
    @pytest.mark.unit
    def test_fields(self) -> None:
        contrib = DiscoveredContribution(name="test", group="test.group", value=42)
        assert contrib.name == "test"
        assert contrib.group == "test.group"
        assert contrib.value == 42


class TestDiscover:
    @pytest.mark.unit
    def test_empty_group_returns_empty_list(self) -> None:
        assert discover("polytenant.nonexistent.group.for.testing") == []

    @pytest.mark.unit
    def test_excluded_names_are_skipped(self) -> None:
        eps = [_entry_point("keep", 1), _entry_point("skip", 2)]
        with patch(
            "polytenant.foundation.application.discovery.entry_points", return_value=eps
        ):
            result = discover("g", exclude_names=frozenset({"skip"}))
        assert [c.name for c in result] == ["keep"]
        eps[1].load.assert_not_called()

    @pytest.mark.unit
    def test_failed_load_is_skipped(self) -> None:
        broken = _entry_point("broken", None)
        broken.load.side_effect = ImportError("boom")
        eps = [broken, _entry_point("ok", "value")]
        with patch(
            "polytenant.foundation.application.discovery.entry_points", return_value=eps
        ):
            result = discover("g")
        assert [c.value for c in result] == ["value"]


class TestIterContributions:
    @pytest.mark.unit
    def test_flattens_lists_and_filters_by_type(self) -> None:
        first = VariantContribution(capability="orders", factory=object)
        second = VariantContribution(capability="health", factory=object)
        third = VariantContribution(capability="health", factory=object, tenant="AcMe")
        eps = [
            _entry_point("single", first),
            _entry_point("several", [second, third]),
            _entry_point("wrong", "not a contribution"),
        ]
        with patch(
            "polytenant.foundation.application.discovery.entry_points", return_value=eps
        ):
            result = iter_contributions("g", VariantContribution)
        assert result == [first, second, third]
