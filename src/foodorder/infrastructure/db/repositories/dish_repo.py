from __future__ import annotations

from sqlalchemy import Engine, select
from sqlalchemy.orm import joinedload

from foodorder.application.ports.repositories import DishRepository
from foodorder.domain.common.ids import MenuItemId, RestaurantId
from foodorder.domain.common.money import Money
from foodorder.domain.menu.entities import MenuItem
from foodorder.infrastructure.db.models.menu import DishModel
from foodorder.infrastructure.db.session import get_engine, session_factory


class SqlAlchemyDishRepository(DishRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._sessions = session_factory(engine or get_engine())

    def get(self, item_id: MenuItemId) -> MenuItem | None:
        statement = (
            select(DishModel)
            .options(joinedload(DishModel.restaurant))
            .where(DishModel.id == str(item_id))
            .limit(1)
        )
        with self._sessions() as session:
            model = session.execute(statement).scalar_one_or_none()
            if model is None:
                return None
            return self._to_domain(model)

    def list_for_restaurant(self, restaurant_id: RestaurantId) -> list[MenuItem]:
        statement = (
            select(DishModel)
            .options(joinedload(DishModel.restaurant))
            .where(DishModel.restaurant_id == str(restaurant_id))
            .order_by(DishModel.id)
        )
        with self._sessions() as session:
            models = session.execute(statement).scalars().all()
            return [self._to_domain(model) for model in models]

    def _to_domain(self, model: DishModel) -> MenuItem:
        return MenuItem(
            item_id=MenuItemId(model.id),
            restaurant_id=RestaurantId(model.restaurant_id),
            restaurant_name=model.restaurant.name,
            name=model.name,
            price_money=Money(amount_cents=model.price_cents, currency=model.currency),
            image_url=model.image_url or "",
            description=model.description,
            category=model.category,
            dietary_tags=tuple(model.dietary_tags or ()),
            ingredients=tuple(model.ingredients or ()),
        )
