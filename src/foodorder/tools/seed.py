from __future__ import annotations

from typing import Any

from sqlalchemy import inspect
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from foodorder.domain.common.ids import MenuItemId, RestaurantId
from foodorder.domain.common.money import DEFAULT_CURRENCY, Money
from foodorder.domain.menu.entities import MenuItem
from foodorder.infrastructure.db.models.menu import DishModel, RestaurantModel
from foodorder.infrastructure.db.session import get_engine

DEMO_RESTAURANTS: list[dict[str, Any]] = [
    {"id": "rst_001", "name": "La Cocina Verde"},
    {"id": "rst_002", "name": "Tacos El Güero"},
]

DEMO_DISHES: list[dict[str, Any]] = [
    {
        "id": "dsh_001",
        "restaurant_id": "rst_001",
        "name": "Bowl de quinoa",
        "description": "Quinoa, aguacate, garbanzo y aderezo de limón",
        "price_cents": 12000,
        "image_url": "https://images.example.com/dishes/quinoa-bowl.jpg",
        "category": "Comida",
        "dietary_tags": ["Vegano", "Sin gluten"],
        "ingredients": ["quinoa", "aguacate", "garbanzo", "limón"],
    },
    {
        "id": "dsh_002",
        "restaurant_id": "rst_001",
        "name": "Chilaquiles verdes",
        "description": "Totopos con salsa verde, crema y queso fresco",
        "price_cents": 9500,
        "image_url": "https://images.example.com/dishes/chilaquiles.jpg",
        "category": "Desayuno",
        "dietary_tags": [],
        "ingredients": ["tortilla", "tomate verde", "crema", "queso fresco"],
    },
    {
        "id": "dsh_003",
        "restaurant_id": "rst_001",
        "name": "Agua de jamaica",
        "description": None,
        "price_cents": 3500,
        "image_url": "",
        "category": "Bebida",
        "dietary_tags": ["Vegano", "Sin lactosa"],
        "ingredients": ["jamaica", "agua"],
    },
    {
        "id": "dsh_004",
        "restaurant_id": "rst_002",
        "name": "Tacos al pastor",
        "description": "Orden de cinco tacos con piña",
        "price_cents": 8000,
        "image_url": "https://images.example.com/dishes/pastor.jpg",
        "category": "Cena",
        "dietary_tags": ["Sin lactosa"],
        "ingredients": ["cerdo", "piña", "tortilla", "cilantro"],
    },
    {
        "id": "dsh_005",
        "restaurant_id": "rst_002",
        "name": "Flan napolitano",
        "description": None,
        "price_cents": 4500,
        "image_url": "",
        "category": "Postre",
        "dietary_tags": [],
        "ingredients": ["huevo", "leche", "vainilla"],
    },
]


def demo_menu_items(currency: str = DEFAULT_CURRENCY) -> list[MenuItem]:
    """Demo catalog as domain objects, used to fill in-memory stores."""
    names = {restaurant["id"]: restaurant["name"] for restaurant in DEMO_RESTAURANTS}
    return [
        MenuItem(
            item_id=MenuItemId(dish["id"]),
            restaurant_id=RestaurantId(dish["restaurant_id"]),
            restaurant_name=names[dish["restaurant_id"]],
            name=dish["name"],
            price_money=Money(amount_cents=dish["price_cents"], currency=currency),
            image_url=dish["image_url"],
            description=dish["description"],
            category=dish["category"],
            dietary_tags=tuple(dish["dietary_tags"]),
            ingredients=tuple(dish["ingredients"]),
        )
        for dish in DEMO_DISHES
    ]


def main() -> None:
    engine = get_engine(timeout_seconds=2.0)
    inspector = inspect(engine)
    required_tables = {"restaurants", "dishes"}
    if not required_tables.issubset(set(inspector.get_table_names(schema="public"))):
        print("no schema yet")
        return

    with Session(engine) as session:
        for restaurant in DEMO_RESTAURANTS:
            session.execute(
                insert(RestaurantModel)
                .values(**restaurant)
                .on_conflict_do_update(
                    index_elements=[RestaurantModel.id],
                    set_={"name": restaurant["name"]},
                )
            )

        for dish in DEMO_DISHES:
            values = {**dish, "currency": DEFAULT_CURRENCY}
            session.execute(
                insert(DishModel)
                .values(**values)
                .on_conflict_do_update(
                    index_elements=[DishModel.id],
                    set_={key: value for key, value in values.items() if key != "id"},
                )
            )

        session.commit()
        print("seed complete")


if __name__ == "__main__":
    main()
