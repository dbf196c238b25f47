from __future__ import annotations

from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from foodorder.api.middleware.request_id import get_request_id
from foodorder.application.ports.repositories import OrderStoreError
from foodorder.application.session import SessionNotFoundError
from foodorder.application.use_cases.browse_menu import RestaurantMenuNotFoundError
from foodorder.application.use_cases.cart import DishNotFoundError
from foodorder.application.use_cases.order_queries import (
    InvalidOrderStatusFilterError,
    OrderNotFoundError,
)
from foodorder.application.use_cases.submit_order import (
    EmptyCartError,
    MissingDeliveryAddressError,
    NotAuthenticatedError,
    OrderSubmissionError,
)
from foodorder.application.use_cases.update_order_status import (
    InvalidOrderStatusError,
    InvalidOrderTransitionError,
    OrderStatusWriteError,
)
from foodorder.domain.cart.entities import CrossRestaurantConflictError, InvalidQuantityError


def _error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            },
            "requestId": get_request_id(),
        },
    )


def _exception_handler(status_code: int, code: str):
    async def handler(_: Request, exc: Exception) -> JSONResponse:
        details = getattr(exc, "details", None)
        return _error_response(
            status_code=status_code,
            code=code,
            message=str(exc),
            details=details if isinstance(details, dict) else None,
        )

    return handler


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    message = str(http_exc.detail) if http_exc.detail else "request failed"
    code = "HTTP_ERROR"
    if http_exc.status_code == 404:
        code = "NOT_FOUND"
    elif http_exc.status_code == 400:
        code = "BAD_REQUEST"
    elif http_exc.status_code == 405:
        code = "METHOD_NOT_ALLOWED"
    elif http_exc.status_code == 409:
        code = "CONFLICT"
    return _error_response(
        status_code=http_exc.status_code,
        code=code,
        message=message,
    )


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    return _error_response(
        status_code=400,
        code="INVALID_REQUEST",
        message="request validation failed",
        details={"errors": validation_exc.errors()},
    )


def register_exception_handlers(app: FastAPI) -> None:
    mappings: list[tuple[type[Exception], int, str]] = [
        (NotAuthenticatedError, 401, "NOT_AUTHENTICATED"),
        (EmptyCartError, 400, "EMPTY_CART"),
        (MissingDeliveryAddressError, 400, "MISSING_DELIVERY_ADDRESS"),
        (InvalidQuantityError, 400, "INVALID_QUANTITY"),
        (CrossRestaurantConflictError, 409, "CROSS_RESTAURANT_CONFLICT"),
        (DishNotFoundError, 404, "DISH_NOT_FOUND"),
        (RestaurantMenuNotFoundError, 404, "MENU_NOT_FOUND"),
        (SessionNotFoundError, 404, "SESSION_NOT_FOUND"),
        (OrderNotFoundError, 404, "ORDER_NOT_FOUND"),
        (InvalidOrderStatusError, 400, "INVALID_ORDER_STATUS"),
        (InvalidOrderStatusFilterError, 400, "INVALID_ORDER_STATUS_FILTER"),
        (InvalidOrderTransitionError, 409, "INVALID_ORDER_TRANSITION"),
        (OrderSubmissionError, 503, "ORDER_SUBMISSION_FAILED"),
        (OrderStatusWriteError, 503, "ORDER_WRITE_FAILED"),
        (OrderStoreError, 503, "ORDER_STORE_UNAVAILABLE"),
    ]

    for exc_cls, status_code, code in mappings:
        app.add_exception_handler(exc_cls, _exception_handler(status_code, code))

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
