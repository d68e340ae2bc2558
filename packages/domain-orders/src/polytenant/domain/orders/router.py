"""Orders REST API router.

Endpoints receive the order and notification capabilities bound for the
request's tenant, so tenant customizations apply without any branching here.
Only the owner of an order may read or change it.
"""

# NOTE: No ``from __future__ import annotations``: FastAPI resolves the
# ``Annotated[..., Depends(...)]`` parameters at runtime.

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field

from polytenant.foundation.application.capabilities import NOTIFICATIONS, ORDERS
from polytenant.foundation.domain import (
    AuthorizationError,
    NotFoundError,
    NotificationCapability,
    Order,
    OrderCapability,
    Principal,
)
from polytenant.infra.fastapi.dependencies import (
    require_principal,
    require_tenant,
    use_capability,
)

# Orders always belong to a tenant: requests without one get 400
router = APIRouter(prefix="/orders", tags=["orders"], dependencies=[Depends(require_tenant)])

Orders = Annotated[OrderCapability, Depends(use_capability(ORDERS))]
Notifications = Annotated[NotificationCapability, Depends(use_capability(NOTIFICATIONS))]
CurrentPrincipal = Annotated[Principal, Depends(require_principal)]


# -- Request / Response models ------------------------------------------------


class OrderRequest(BaseModel):
    project_id: int = Field(ge=1)
    details: str = Field(min_length=1, max_length=5000)


class OrderResponse(BaseModel):
    guid: str
    project_id: int
    details: str
    tenant: str | None
    owner_email: str | None
    created_at: datetime
    updated_at: datetime


class OrderPageResponse(BaseModel):
    data: list[OrderResponse]
    total: int
    page: int
    per_page: int
    last_page: int


# -- Endpoints ----------------------------------------------------------------


@router.get("")
def list_orders(
    orders: Orders,
    principal: CurrentPrincipal,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 10,
) -> OrderPageResponse:
    """List the caller's orders, newest first."""
    result = orders.get_orders(principal.user_id, page, per_page)
    return OrderPageResponse(
        data=[_order_response(o) for o in result.items],
        total=result.total,
        page=result.page,
        per_page=result.per_page,
        last_page=result.last_page,
    )


@router.post("", status_code=201)
def create_order(
    body: OrderRequest,
    orders: Orders,
    notifications: Notifications,
    principal: CurrentPrincipal,
) -> OrderResponse:
    """Create an order and notify its owner."""
    order = orders.create_order(principal.user_id, principal.email, body.project_id, body.details)
    notifications.notify_order_created(order)
    return _order_response(order)


@router.get("/{guid}")
def get_order(guid: str, orders: Orders, principal: CurrentPrincipal) -> OrderResponse:
    """Retrieve one of the caller's orders."""
    return _order_response(_owned_order(orders, guid, principal))


@router.put("/{guid}")
def update_order(
    guid: str,
    body: OrderRequest,
    orders: Orders,
    notifications: Notifications,
    principal: CurrentPrincipal,
) -> OrderResponse:
    """Update an order and notify its owner."""
    order = _owned_order(orders, guid, principal)
    updated = orders.update_order(order, body.project_id, body.details)
    notifications.notify_order_updated(updated)
    return _order_response(updated)


@router.delete("/{guid}", status_code=204)
def delete_order(guid: str, orders: Orders, principal: CurrentPrincipal) -> Response:
    """Delete one of the caller's orders."""
    orders.delete_order(_owned_order(orders, guid, principal))
    return Response(status_code=204)


# -- Helpers ------------------------------------------------------------------


def _owned_order(orders: OrderCapability, guid: str, principal: Principal) -> Order:
    order = orders.get_order(guid)
    if order is None:
        raise NotFoundError("Order", guid)
    if order.user_id != principal.user_id:
        raise AuthorizationError(
            "You do not have access to this order", context={"order_guid": guid}
        )
    return order


def _order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        guid=order.guid,
        project_id=order.project_id,
        details=order.details,
        tenant=order.tenant,
        owner_email=order.owner_email,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )
