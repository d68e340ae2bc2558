"""Broker settings for background jobs.

Loaded from ``TASKIQ_``-prefixed environment variables. Every value here is
read by :func:`polytenant.infra.taskiq.broker.get_broker` or
:func:`~polytenant.infra.taskiq.broker.get_result_backend`.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TaskIQSettings(BaseSettings):
    """Redis stream broker and result backend configuration.

    Environment Variables:
        TASKIQ_REDIS_URL: Redis URL shared by broker and results (default: redis://localhost:6379/1)
        TASKIQ_QUEUE_NAME: Redis stream the broker writes to and reads from (default: polytenant)
        TASKIQ_CONSUMER_GROUP: Consumer group of the worker processes (default: polytenant-workers)
        TASKIQ_RESULT_TTL: Seconds a task result is kept (default: 3600)

    Deployments sharing one Redis database separate their jobs by queue name.
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKIQ_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    redis_url: str = Field(default="redis://localhost:6379/1")
    queue_name: str = Field(default="polytenant", min_length=1)
    consumer_group: str = Field(default="polytenant-workers", min_length=1)
    result_ttl: int = Field(default=3600, ge=60, le=86400)


@lru_cache(maxsize=1)
def get_taskiq_settings() -> TaskIQSettings:
    """Get cached TaskIQ settings singleton."""
    return TaskIQSettings()
