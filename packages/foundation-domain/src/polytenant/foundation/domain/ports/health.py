"""Port interface for the health reporting capability."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class HealthCapability(Protocol):
    """Reports application status, optionally with tenant-specific checks."""

    def get_status(self) -> dict[str, Any]:
        """Perform the health check and return a JSON-serializable status."""
        ...
