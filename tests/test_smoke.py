"""Smoke tests to verify PEP 420 namespace package resolution.

Each test imports the leaf __init__.py of a polytenant package to confirm
the implicit namespace package layout works correctly.
"""

from __future__ import annotations


def test_foundation_domain_importable() -> None:
    import polytenant.foundation.domain  # noqa: F401


def test_foundation_application_importable() -> None:
    import polytenant.foundation.application  # noqa: F401


def test_infra_fastapi_importable() -> None:
    import polytenant.infra.fastapi  # noqa: F401


def test_infra_observability_importable() -> None:
    import polytenant.infra.observability  # noqa: F401


def test_infra_taskiq_importable() -> None:
    import polytenant.infra.taskiq  # noqa: F401


def test_domain_orders_importable() -> None:
    import polytenant.domain.orders  # noqa: F401
