from __future__ import annotations

from sqlalchemy import ColumnElement, Engine, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import joinedload

from foodorder.application.ports.repositories import (
    DuplicateOrderError,
    OrderRepository,
    OrderStoreError,
)
from foodorder.domain.common.clock import to_epoch_millis
from foodorder.domain.common.ids import MenuItemId, OrderId, RestaurantId, UserId
from foodorder.domain.common.money import Money
from foodorder.domain.order.entities import Order, OrderLine, OrderStatus
from foodorder.infrastructure.db.models.order import OrderLineModel, OrderModel
from foodorder.infrastructure.db.session import get_engine, session_factory


class SqlAlchemyOrderRepository(OrderRepository):
    """Orders in SQL; ``created_at`` and ``updated_at`` come from the database clock."""

    def __init__(self, engine: Engine | None = None) -> None:
        self._sessions = session_factory(engine or get_engine())

    def add(self, order: Order) -> Order:
        try:
            with self._sessions() as session:
                if session.get(OrderModel, str(order.order_id)) is not None:
                    raise DuplicateOrderError(f"order {order.order_id} already exists")
                session.add(self._to_model(order))
                try:
                    session.commit()
                except IntegrityError as exc:
                    session.rollback()
                    raise DuplicateOrderError(f"order {order.order_id} already exists") from exc
        except SQLAlchemyError as exc:
            raise OrderStoreError(str(exc)) from exc

        created = self.get(order.order_id)
        if created is None:
            raise OrderStoreError(f"order {order.order_id} not found after insert")
        return created

    def get(self, order_id: OrderId) -> Order | None:
        statement = (
            select(OrderModel)
            .options(joinedload(OrderModel.lines))
            .where(OrderModel.id == str(order_id))
            .limit(1)
        )
        try:
            with self._sessions() as session:
                model = session.execute(statement).unique().scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise OrderStoreError(str(exc)) from exc

        if model is None:
            return None
        return self._to_domain(model)

    def update_status(self, order_id: OrderId, status: OrderStatus) -> Order | None:
        statement = (
            update(OrderModel)
            .where(OrderModel.id == str(order_id))
            .values(status=status.value, updated_at=func.now())
        )
        try:
            with self._sessions() as session:
                result = session.execute(statement)
                if result.rowcount != 1:
                    session.rollback()
                    return None
                session.commit()
        except SQLAlchemyError as exc:
            raise OrderStoreError(str(exc)) from exc

        return self.get(order_id)

    def list_for_customer(self, user_id: UserId) -> list[Order]:
        return self._list(OrderModel.user_id == str(user_id))

    def list_for_restaurant(self, restaurant_id: RestaurantId) -> list[Order]:
        return self._list(OrderModel.restaurant_id == str(restaurant_id))

    def _list(self, condition: ColumnElement[bool]) -> list[Order]:
        statement = (
            select(OrderModel)
            .options(joinedload(OrderModel.lines))
            .where(condition)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        try:
            with self._sessions() as session:
                models = list(session.execute(statement).unique().scalars().all())
        except SQLAlchemyError as exc:
            raise OrderStoreError(str(exc)) from exc
        return [self._to_domain(model) for model in models]

    def _to_model(self, order: Order) -> OrderModel:
        order_model = OrderModel(
            id=str(order.order_id),
            user_id=str(order.user_id),
            user_name=order.user_name,
            user_email=order.user_email,
            restaurant_id=str(order.restaurant_id),
            restaurant_name=order.restaurant_name,
            status=order.status.value,
            subtotal_cents=order.subtotal.amount_cents,
            delivery_fee_cents=order.delivery_fee.amount_cents,
            total_cents=order.total.amount_cents,
            currency=order.total.currency,
            delivery_address=order.delivery_address,
            delivery_instructions=order.delivery_instructions,
            payment_method=order.payment_method,
        )
        order_model.lines = [
            OrderLineModel(
                position=position,
                dish_id=str(line.dish_id),
                dish_name=line.dish_name,
                dish_image_url=line.dish_image_url,
                quantity=line.quantity,
                unit_price_cents=line.unit_price.amount_cents,
                line_total_cents=line.line_total.amount_cents,
            )
            for position, line in enumerate(order.lines)
        ]
        return order_model

    def _to_domain(self, model: OrderModel) -> Order:
        currency = model.currency
        lines = [
            OrderLine(
                dish_id=MenuItemId(line.dish_id),
                dish_name=line.dish_name,
                dish_image_url=line.dish_image_url,
                quantity=line.quantity,
                unit_price=Money(amount_cents=line.unit_price_cents, currency=currency),
                line_total=Money(amount_cents=line.line_total_cents, currency=currency),
            )
            for line in model.lines
        ]
        return Order(
            order_id=OrderId(model.id),
            user_id=UserId(model.user_id),
            user_name=model.user_name,
            user_email=model.user_email,
            restaurant_id=RestaurantId(model.restaurant_id),
            restaurant_name=model.restaurant_name,
            lines=lines,
            subtotal=Money(amount_cents=model.subtotal_cents, currency=currency),
            delivery_fee=Money(amount_cents=model.delivery_fee_cents, currency=currency),
            total=Money(amount_cents=model.total_cents, currency=currency),
            delivery_address=model.delivery_address,
            delivery_instructions=model.delivery_instructions,
            payment_method=model.payment_method,
            status=OrderStatus(model.status),
            created_at=to_epoch_millis(model.created_at),
            updated_at=to_epoch_millis(model.updated_at),
        )
