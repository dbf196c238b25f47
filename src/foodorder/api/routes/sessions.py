from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Response, status

from foodorder.api.container import AppContainer, current_trace_context, get_container
from foodorder.api.identity import current_identity
from foodorder.application.dto.requests import (
    AddCartItemRequest,
    CheckoutRequest,
    UpdateCartItemRequest,
)
from foodorder.application.dto.responses import CartResponse, OrderResponse
from foodorder.application.mappers.cart_mapper import to_cart_response
from foodorder.application.ports.identity import CustomerIdentity
from foodorder.application.use_cases.cart import (
    AddCartItem,
    ClearCart,
    GetCart,
    RemoveCartItem,
    StepCartItem,
    UpdateCartItemQuantity,
)
from foodorder.application.use_cases.submit_order import CheckoutSession, SubmitOrder
from foodorder.domain.common.ids import MenuItemId, SessionId

router = APIRouter()


@router.post(
    "/v1/sessions",
    response_model=CartResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_session(container: AppContainer = Depends(get_container)) -> CartResponse:
    session = container.sessions.create()
    return to_cart_response(session.session_id, session.cart)


@router.delete("/v1/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def drop_session(
    session_id: str,
    container: AppContainer = Depends(get_container),
) -> Response:
    container.sessions.drop(SessionId(session_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/v1/sessions/{session_id}/cart", response_model=CartResponse)
def get_cart(
    session_id: str,
    container: AppContainer = Depends(get_container),
) -> CartResponse:
    return GetCart(container.sessions).execute(SessionId(session_id))


@router.post("/v1/sessions/{session_id}/cart/items", response_model=CartResponse)
def add_cart_item(
    session_id: str,
    request_dto: AddCartItemRequest,
    container: AppContainer = Depends(get_container),
) -> CartResponse:
    use_case = AddCartItem(sessions=container.sessions, dish_repository=container.dish_repository)
    return use_case.execute(SessionId(session_id), request_dto)


@router.put("/v1/sessions/{session_id}/cart/items/{item_id}", response_model=CartResponse)
def update_cart_item(
    session_id: str,
    item_id: str,
    request_dto: UpdateCartItemRequest,
    container: AppContainer = Depends(get_container),
) -> CartResponse:
    return UpdateCartItemQuantity(container.sessions).execute(
        SessionId(session_id),
        MenuItemId(item_id),
        request_dto,
    )


@router.post(
    "/v1/sessions/{session_id}/cart/items/{item_id}/increment",
    response_model=CartResponse,
)
def increment_cart_item(
    session_id: str,
    item_id: str,
    container: AppContainer = Depends(get_container),
) -> CartResponse:
    return StepCartItem(container.sessions).increment(SessionId(session_id), MenuItemId(item_id))


@router.post(
    "/v1/sessions/{session_id}/cart/items/{item_id}/decrement",
    response_model=CartResponse,
)
def decrement_cart_item(
    session_id: str,
    item_id: str,
    container: AppContainer = Depends(get_container),
) -> CartResponse:
    return StepCartItem(container.sessions).decrement(SessionId(session_id), MenuItemId(item_id))


@router.delete("/v1/sessions/{session_id}/cart/items/{item_id}", response_model=CartResponse)
def remove_cart_item(
    session_id: str,
    item_id: str,
    container: AppContainer = Depends(get_container),
) -> CartResponse:
    return RemoveCartItem(container.sessions).execute(SessionId(session_id), MenuItemId(item_id))


@router.delete("/v1/sessions/{session_id}/cart", response_model=CartResponse)
def clear_cart(
    session_id: str,
    container: AppContainer = Depends(get_container),
) -> CartResponse:
    return ClearCart(container.sessions).execute(SessionId(session_id))


@router.post(
    "/v1/sessions/{session_id}/checkout",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    session_id: str,
    request_dto: CheckoutRequest,
    identity: CustomerIdentity | None = Depends(current_identity),
    idempotency_key: str | None = Header(default=None, alias="Idempotency-Key"),
    container: AppContainer = Depends(get_container),
) -> OrderResponse:
    use_case = CheckoutSession(
        sessions=container.sessions,
        submit_order=SubmitOrder(
            order_repository=container.order_repository,
            publisher=container.publisher,
            delivery_fee=container.delivery_fee,
        ),
    )
    return use_case.execute(
        session_id=SessionId(session_id),
        identity=identity,
        request_dto=request_dto,
        trace_ctx=current_trace_context(),
        idempotency_key=idempotency_key or None,
    )
