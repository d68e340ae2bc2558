"""Startup and shutdown ordering for the app factory.

Each discovered :class:`~polytenant.foundation.application.LifespanContribution`
wraps one resource (logging, the task broker, ...). They are entered in
ascending priority and unwound in reverse, so a hook may rely on every hook
with a lower priority being up for its whole lifetime.
"""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Sequence
    from contextlib import AbstractAsyncContextManager

    from fastapi import FastAPI

    from polytenant.foundation.application import LifespanContribution

logger = logging.getLogger(__name__)


def _hook_name(hook: Any) -> str:
    return getattr(hook, "__qualname__", None) or repr(hook)


def compose_lifespan(
    hooks: Sequence[LifespanContribution],
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Fold ``hooks`` into one FastAPI ``lifespan`` callable.

    If a hook fails to start, the hooks already started are shut down
    before the error propagates.
    """
    ordered = sorted(hooks, key=lambda contribution: contribution.priority)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with AsyncExitStack() as stack:
            for contribution in ordered:
                await stack.enter_async_context(contribution.hook(app))
                logger.info(
                    "lifespan_hook_started",
                    extra={
                        "hook": _hook_name(contribution.hook),
                        "priority": contribution.priority,
                    },
                )
            logger.info("lifespan_ready", extra={"hooks": len(ordered)})
            yield
            logger.info("lifespan_stopping", extra={"hooks": len(ordered)})

    return lifespan
