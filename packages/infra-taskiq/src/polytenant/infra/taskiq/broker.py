"""TaskIQ broker configuration with Redis Stream.

This module provides factory functions for the TaskIQ broker and result
backend configured to use Redis Stream for reliable message delivery with
acknowledgements. The broker carries :class:`TenantTaskMiddleware`, so
tasks sent with :func:`kiq_for_tenant` run inside their tenant's scope.

Usage:
    # Define a task
    from polytenant.infra.taskiq import broker

    @broker.task
    async def send_digest(order_guid: str) -> None:
        ...

    # Enqueue task for a tenant
    await kiq_for_tenant(send_digest, "WayneEnt", "01HZX3")

    # Start worker
    # taskiq worker polytenant.infra.taskiq.broker:broker
"""

from __future__ import annotations

from functools import lru_cache

from taskiq_redis import RedisAsyncResultBackend, RedisStreamBroker

from polytenant.infra.taskiq.settings import get_taskiq_settings
from polytenant.infra.taskiq.tenant_middleware import TenantTaskMiddleware


@lru_cache(maxsize=1)
def get_result_backend() -> RedisAsyncResultBackend[str]:
    """Get or create the TaskIQ result backend."""
    settings = get_taskiq_settings()
    return RedisAsyncResultBackend(
        redis_url=settings.redis_url,
        result_ex_time=settings.result_ttl,
    )


@lru_cache(maxsize=1)
def get_broker() -> RedisStreamBroker:
    """Get or create the TaskIQ broker.

    Returns:
        RedisStreamBroker on the configured stream and consumer group, with
        the result backend and the tenant task middleware.
    """
    settings = get_taskiq_settings()
    return (
        RedisStreamBroker(
            url=settings.redis_url,
            queue_name=settings.queue_name,
            consumer_group_name=settings.consumer_group,
        )
        .with_result_backend(get_result_backend())
        .with_middlewares(TenantTaskMiddleware())
    )


# Module-level references for the taskiq CLI, which expects
# `taskiq worker module:broker`. Created lazily on first attribute access.


class _LazyBroker:
    """Lazy proxy that defers broker creation until first attribute access."""

    _instance: RedisStreamBroker | None = None

    def _get(self) -> RedisStreamBroker:
        if self._instance is None:
            self._instance = get_broker()
        return self._instance

    def __getattr__(self, name: str) -> object:
        return getattr(self._get(), name)


broker: RedisStreamBroker = _LazyBroker()  # type: ignore[assignment]
