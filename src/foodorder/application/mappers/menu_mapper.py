from __future__ import annotations

from foodorder.application.dto.responses import DishResponse, MenuResponse
from foodorder.domain.common.ids import MenuItemId, RestaurantId
from foodorder.domain.common.money import Money
from foodorder.domain.menu.entities import MenuItem


def to_dish_response(item: MenuItem) -> DishResponse:
    return DishResponse(
        itemId=str(item.item_id),
        restaurantId=str(item.restaurant_id),
        restaurantName=item.restaurant_name,
        name=item.name,
        description=item.description,
        category=item.category,
        dietaryTags=list(item.dietary_tags),
        ingredients=list(item.ingredients),
        price=item.price_money.to_decimal(),
        currency=item.price_money.currency,
        imageUrl=item.image_url,
    )


def to_menu_response(restaurant_id: RestaurantId, items: list[MenuItem]) -> MenuResponse:
    return MenuResponse(
        restaurantId=str(restaurant_id),
        items=[to_dish_response(item) for item in items],
    )


def from_dish_response(dish: DishResponse) -> MenuItem:
    return MenuItem(
        item_id=MenuItemId(dish.itemId),
        restaurant_id=RestaurantId(dish.restaurantId),
        restaurant_name=dish.restaurantName,
        name=dish.name,
        price_money=Money(
            amount_cents=int(dish.price * 100),
            currency=dish.currency,
        ),
        image_url=dish.imageUrl,
        description=dish.description,
        category=dish.category,
        dietary_tags=tuple(dish.dietaryTags),
        ingredients=tuple(dish.ingredients),
    )
