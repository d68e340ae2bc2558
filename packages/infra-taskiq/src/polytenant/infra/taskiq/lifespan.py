"""TaskIQ lifespan hook for broker startup/shutdown.

Ensures the broker is started at application startup and cleanly shut
down when the application stops. Priority 150 starts it after logging.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from polytenant.foundation.application import LifespanContribution
from polytenant.foundation.application.contributions import LIFESPAN_PRIORITY_TASKIQ
from polytenant.infra.taskiq.broker import get_broker
from polytenant.infra.taskiq.errors import TaskIQBrokerError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _taskiq_lifespan(app: Any) -> AsyncIterator[None]:
    """Manage TaskIQ broker lifecycle.

    Raises:
        TaskIQBrokerError: If the broker cannot start.
    """
    _broker = get_broker()
    try:
        await _broker.startup()
    except (ConnectionError, OSError) as exc:
        raise TaskIQBrokerError(f"TaskIQ broker failed to start: {exc}") from exc
    logger.info("taskiq_broker_started")

    try:
        yield
    finally:
        await _broker.shutdown()
        logger.info("taskiq_broker_shut_down")


lifespan_contribution = LifespanContribution(
    hook=_taskiq_lifespan,
    priority=LIFESPAN_PRIORITY_TASKIQ,
)
