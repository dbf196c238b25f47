from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from foodorder.api.container import AppContainer, current_trace_context, get_container
from foodorder.api.identity import current_identity
from foodorder.application.dto.requests import UpdateOrderStatusRequest
from foodorder.application.dto.responses import OrderListResponse, OrderResponse
from foodorder.application.ports.identity import CustomerIdentity
from foodorder.application.use_cases.cancel_order import CancelOrder
from foodorder.application.use_cases.order_queries import (
    GetOrder,
    ListCustomerOrders,
    ListRestaurantOrders,
)
from foodorder.application.use_cases.update_order_status import UpdateOrderStatus
from foodorder.domain.common.ids import OrderId, RestaurantId

router = APIRouter()


@router.get("/v1/orders/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: str,
    container: AppContainer = Depends(get_container),
) -> OrderResponse:
    return GetOrder(order_repository=container.order_repository).execute(order_id=OrderId(order_id))


@router.post("/v1/orders/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: str,
    request_dto: UpdateOrderStatusRequest,
    container: AppContainer = Depends(get_container),
) -> OrderResponse:
    use_case = UpdateOrderStatus(
        order_repository=container.order_repository,
        publisher=container.publisher,
        policy=container.transition_policy,
    )
    return use_case.execute(
        order_id=OrderId(order_id),
        request_dto=request_dto,
        trace_ctx=current_trace_context(),
    )


@router.post("/v1/orders/{order_id}/cancel", response_model=OrderResponse)
def cancel_order(
    order_id: str,
    identity: CustomerIdentity | None = Depends(current_identity),
    container: AppContainer = Depends(get_container),
) -> OrderResponse:
    use_case = CancelOrder(
        order_repository=container.order_repository,
        publisher=container.publisher,
        policy=container.transition_policy,
    )
    return use_case.execute(
        order_id=OrderId(order_id),
        identity=identity,
        trace_ctx=current_trace_context(),
    )


@router.get("/v1/me/orders", response_model=OrderListResponse)
def list_my_orders(
    status: str = Query(default="ALL"),
    identity: CustomerIdentity | None = Depends(current_identity),
    container: AppContainer = Depends(get_container),
) -> OrderListResponse:
    use_case = ListCustomerOrders(order_repository=container.order_repository)
    return use_case.execute(identity, status=status)


@router.get("/v1/restaurants/{restaurant_id}/orders", response_model=OrderListResponse)
def list_restaurant_orders(
    restaurant_id: str,
    status: str = Query(default="ALL"),
    container: AppContainer = Depends(get_container),
) -> OrderListResponse:
    use_case = ListRestaurantOrders(order_repository=container.order_repository)
    return use_case.execute(RestaurantId(restaurant_id), status=status)
