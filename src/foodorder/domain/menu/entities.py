from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from foodorder.domain.common.ids import MenuItemId, RestaurantId
from foodorder.domain.common.money import Money

DISH_CATEGORIES: tuple[str, ...] = (
    "Desayuno",
    "Comida",
    "Cena",
    "Snack",
    "Bebida",
    "Postre",
)

DIETARY_TAGS: tuple[str, ...] = (
    "Vegano",
    "Sin gluten",
    "Sin lactosa",
    "Sin azúcar",
    "Alto en proteína",
    "Bajo en calorías",
    "Sin soya",
    "Keto-friendly",
    "Paleo",
    "Orgánico",
    "Sin frutos secos",
    "Crudo",
)


@dataclass(frozen=True)
class MenuItem:
    item_id: MenuItemId
    restaurant_id: RestaurantId
    restaurant_name: str
    name: str
    price_money: Money
    image_url: str = ""
    description: str | None = None
    category: str | None = None
    dietary_tags: tuple[str, ...] = field(default_factory=tuple)
    ingredients: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if not str(self.restaurant_id).strip():
            raise ValueError("restaurant_id must be non-empty")


def filter_menu_items(
    items: Iterable[MenuItem],
    category: str | None = None,
    tags: Iterable[str] = (),
) -> list[MenuItem]:
    """Category must match exactly when given; any one of ``tags`` is enough."""
    wanted_tags = set(tags)
    return [
        item
        for item in items
        if (category is None or item.category == category)
        and (not wanted_tags or wanted_tags.intersection(item.dietary_tags))
    ]
