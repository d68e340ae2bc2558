"""Tests for TaskIQ error hierarchy."""

from __future__ import annotations

import pytest

from polytenant.infra.taskiq.errors import (
    TaskIQBrokerError,
    TaskIQError,
    TaskIQTenantError,
)


@pytest.mark.unit
class TestTaskIQErrorHierarchy:
    def test_subtypes_are_taskiq_errors(self) -> None:
        assert issubclass(TaskIQBrokerError, TaskIQError)
        assert issubclass(TaskIQTenantError, TaskIQError)

    def test_catch_base_catches_subtypes(self) -> None:
        with pytest.raises(TaskIQError):
            raise TaskIQTenantError("no tenant")
