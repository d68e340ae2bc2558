"""Polytenant Infra TaskIQ: broker factory and tenant-scoped task execution."""

from polytenant.infra.taskiq.broker import broker, get_broker, get_result_backend
from polytenant.infra.taskiq.errors import (
    TaskIQBrokerError,
    TaskIQError,
    TaskIQTenantError,
)
from polytenant.infra.taskiq.lifespan import lifespan_contribution
from polytenant.infra.taskiq.settings import TaskIQSettings, get_taskiq_settings
from polytenant.infra.taskiq.tenant_middleware import (
    TENANT_LABEL,
    TenantTaskMiddleware,
    kiq_for_tenant,
)

__all__ = [
    "TENANT_LABEL",
    "TaskIQBrokerError",
    "TaskIQError",
    "TaskIQSettings",
    "TaskIQTenantError",
    "TenantTaskMiddleware",
    "broker",
    "get_broker",
    "get_result_backend",
    "get_taskiq_settings",
    "kiq_for_tenant",
    "lifespan_contribution",
]
