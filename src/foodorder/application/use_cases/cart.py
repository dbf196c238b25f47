from __future__ import annotations

import logging

from foodorder.application.dto.requests import AddCartItemRequest, UpdateCartItemRequest
from foodorder.application.dto.responses import CartResponse
from foodorder.application.mappers.cart_mapper import to_cart_response
from foodorder.application.metrics.order_lifecycle import record_cart_conflict
from foodorder.application.ports.repositories import DishRepository
from foodorder.application.session import SessionRegistry
from foodorder.domain.cart.entities import CrossRestaurantConflictError
from foodorder.domain.common.ids import MenuItemId, SessionId

logger = logging.getLogger(__name__)


class DishNotFoundError(Exception):
    pass


class AddCartItem:
    def __init__(self, sessions: SessionRegistry, dish_repository: DishRepository) -> None:
        self._sessions = sessions
        self._dish_repository = dish_repository

    def execute(self, session_id: SessionId, request_dto: AddCartItemRequest) -> CartResponse:
        item = self._dish_repository.get(MenuItemId(request_dto.item_id))
        if item is None:
            # Unknown sessions still report SESSION_NOT_FOUND first.
            self._sessions.get(session_id)
            raise DishNotFoundError(f"dish {request_dto.item_id} does not exist")

        with self._sessions.locked(session_id) as session:
            try:
                session.cart.add_item(item, quantity=request_dto.quantity)
            except CrossRestaurantConflictError:
                record_cart_conflict()
                logger.info(
                    "cart_conflict",
                    extra={
                        "session_id": str(session_id),
                        "restaurant_id": str(item.restaurant_id),
                    },
                )
                raise
            return to_cart_response(session.session_id, session.cart)


class UpdateCartItemQuantity:
    def __init__(self, sessions: SessionRegistry) -> None:
        self._sessions = sessions

    def execute(
        self,
        session_id: SessionId,
        item_id: MenuItemId,
        request_dto: UpdateCartItemRequest,
    ) -> CartResponse:
        with self._sessions.locked(session_id) as session:
            session.cart.update_quantity(item_id, request_dto.quantity)
            return to_cart_response(session.session_id, session.cart)


class StepCartItem:
    def __init__(self, sessions: SessionRegistry) -> None:
        self._sessions = sessions

    def increment(self, session_id: SessionId, item_id: MenuItemId) -> CartResponse:
        with self._sessions.locked(session_id) as session:
            session.cart.increment(item_id)
            return to_cart_response(session.session_id, session.cart)

    def decrement(self, session_id: SessionId, item_id: MenuItemId) -> CartResponse:
        with self._sessions.locked(session_id) as session:
            session.cart.decrement(item_id)
            return to_cart_response(session.session_id, session.cart)


class RemoveCartItem:
    def __init__(self, sessions: SessionRegistry) -> None:
        self._sessions = sessions

    def execute(self, session_id: SessionId, item_id: MenuItemId) -> CartResponse:
        with self._sessions.locked(session_id) as session:
            session.cart.remove(item_id)
            return to_cart_response(session.session_id, session.cart)


class ClearCart:
    def __init__(self, sessions: SessionRegistry) -> None:
        self._sessions = sessions

    def execute(self, session_id: SessionId) -> CartResponse:
        with self._sessions.locked(session_id) as session:
            session.cart.clear()
            return to_cart_response(session.session_id, session.cart)


class GetCart:
    def __init__(self, sessions: SessionRegistry) -> None:
        self._sessions = sessions

    def execute(self, session_id: SessionId) -> CartResponse:
        with self._sessions.locked(session_id) as session:
            return to_cart_response(session.session_id, session.cart)
