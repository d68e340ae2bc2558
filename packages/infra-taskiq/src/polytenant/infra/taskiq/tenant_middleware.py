"""Tenant scope for background tasks.

Tasks have no request to resolve a tenant from, so the sender names it.
:func:`kiq_for_tenant` puts the tenant in the ``tenant_id`` label and the
worker-side :class:`TenantTaskMiddleware` opens a job scope for it before
the task body runs:

    await kiq_for_tenant(send_digest, "WayneEnt", order_guid)

    @broker.task
    async def send_digest(order_guid: str) -> None:
        orders = get_capability(ORDERS)  # WayneEnt's binding
        ...

Messages without the label run without a tenant scope.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import ExitStack
from typing import TYPE_CHECKING, Any

from taskiq import TaskiqMiddleware

from polytenant.foundation.application import TenancyRuntime, get_tenancy_runtime
from polytenant.foundation.application.context import get_optional_context
from polytenant.foundation.domain.identifiers import TenantId
from polytenant.infra.taskiq.errors import TaskIQTenantError

if TYPE_CHECKING:
    from taskiq import AsyncTaskiqDecoratedTask, AsyncTaskiqTask, TaskiqMessage, TaskiqResult

logger = logging.getLogger(__name__)

TENANT_LABEL = "tenant_id"
CORRELATION_LABEL = "correlation_id"

RuntimeSource = TenancyRuntime | Callable[[], TenancyRuntime]


class TenantTaskMiddleware(TaskiqMiddleware):
    """Runs each labelled task inside ``runtime.job_scope(tenant)``.

    The scope is entered in :meth:`pre_execute` and closed in
    :meth:`post_execute`, which taskiq calls for successful and failed
    tasks alike. Both run in the receiver's context for the message, so
    the request context set here is the one the task body sees.

    Args:
        runtime: Tenancy runtime, or a callable returning it. Defaults to
            :func:`get_tenancy_runtime`, resolved on the first labelled task.
    """

    def __init__(self, runtime: RuntimeSource | None = None) -> None:
        super().__init__()
        self._runtime_source: RuntimeSource = runtime if runtime is not None else get_tenancy_runtime
        self._scopes: dict[str, ExitStack] = {}

    @property
    def runtime(self) -> TenancyRuntime:
        source = self._runtime_source
        if isinstance(source, TenancyRuntime):
            return source
        return source()

    @property
    def open_scopes(self) -> int:
        """Number of tasks currently running inside a tenant scope."""
        return len(self._scopes)

    def pre_execute(self, message: TaskiqMessage) -> TaskiqMessage:
        raw_tenant = message.labels.get(TENANT_LABEL)
        if raw_tenant is None or not str(raw_tenant).strip():
            return message

        correlation_id = str(message.labels.get(CORRELATION_LABEL) or message.task_id)
        stack = ExitStack()
        context = stack.enter_context(
            self.runtime.job_scope(str(raw_tenant), correlation_id=correlation_id)
        )
        self._scopes[message.task_id] = stack
        logger.debug(
            "task_tenant_scope_opened",
            extra={
                "task_name": message.task_name,
                "task_id": message.task_id,
                "tenant_id": str(context.published_tenant),
            },
        )
        return message

    def post_execute(self, message: TaskiqMessage, result: TaskiqResult[Any]) -> None:
        stack = self._scopes.pop(message.task_id, None)
        if stack is not None:
            stack.close()

    def on_error(
        self,
        message: TaskiqMessage,
        result: TaskiqResult[Any],
        exception: BaseException,
    ) -> None:
        if message.task_id in self._scopes:
            logger.warning(
                "task_failed_in_tenant_scope",
                extra={
                    "task_name": message.task_name,
                    "task_id": message.task_id,
                    "tenant_id": message.labels.get(TENANT_LABEL),
                    "exception_type": type(exception).__name__,
                },
            )


async def kiq_for_tenant(
    task: AsyncTaskiqDecoratedTask[Any, Any],
    tenant: TenantId | str,
    *args: Any,
    **kwargs: Any,
) -> AsyncTaskiqTask[Any]:
    """Send ``task`` to run as ``tenant``.

    When called inside a request, the request's correlation ID travels with
    the task so worker logs line up with the request that queued it.

    Raises:
        TaskIQTenantError: If ``tenant`` is blank.
    """
    try:
        tenant_id = tenant if isinstance(tenant, TenantId) else TenantId(tenant)
    except (TypeError, ValueError) as exc:
        raise TaskIQTenantError(f"Cannot send '{task.task_name}' without a tenant") from exc

    labels: dict[str, Any] = {TENANT_LABEL: str(tenant_id)}
    context = get_optional_context()
    if context is not None:
        labels[CORRELATION_LABEL] = context.correlation_id

    return await task.kicker().with_labels(**labels).kiq(*args, **kwargs)
