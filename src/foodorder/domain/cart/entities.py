from __future__ import annotations

from dataclasses import dataclass

from foodorder.domain.common.ids import MenuItemId, RestaurantId
from foodorder.domain.common.money import DEFAULT_CURRENCY, Money, sum_money
from foodorder.domain.menu.entities import MenuItem

MAX_LINE_QUANTITY = 10


@dataclass(frozen=True)
class CartLine:
    item: MenuItem
    quantity: int

    def __post_init__(self) -> None:
        if not 1 <= self.quantity <= MAX_LINE_QUANTITY:
            raise ValueError(f"quantity must be between 1 and {MAX_LINE_QUANTITY}")

    @property
    def line_total(self) -> Money:
        return self.item.price_money.times(self.quantity)


class Cart:
    """Restaurant-scoped selection of menu items for one client session.

    Lines are kept in insertion order and are unique by item id. Every line
    references the same restaurant; adding an item from another restaurant
    raises ``CrossRestaurantConflictError`` and leaves the cart unchanged.
    """

    def __init__(self, currency: str = DEFAULT_CURRENCY) -> None:
        self._currency = currency
        self._lines: list[CartLine] = []

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def total(self) -> Money:
        return sum_money([line.line_total for line in self._lines], currency=self._currency)

    @property
    def restaurant_id(self) -> RestaurantId | None:
        if not self._lines:
            return None
        return self._lines[0].item.restaurant_id

    @property
    def restaurant_name(self) -> str | None:
        if not self._lines:
            return None
        return self._lines[0].item.restaurant_name

    def add_item(self, item: MenuItem, quantity: int = 1) -> CartLine:
        if quantity < 1:
            raise InvalidQuantityError("quantity must be >= 1")
        if self._lines and item.restaurant_id != self.restaurant_id:
            raise CrossRestaurantConflictError(
                f"cart holds items from restaurant {self.restaurant_id}; "
                f"clear it before adding items from restaurant {item.restaurant_id}",
                cart_restaurant_id=str(self.restaurant_id),
                item_restaurant_id=str(item.restaurant_id),
            )

        index = self._index_of(item.item_id)
        if index is None:
            line = CartLine(item=item, quantity=min(quantity, MAX_LINE_QUANTITY))
            self._lines.append(line)
            return line

        existing = self._lines[index]
        line = CartLine(
            item=existing.item,
            quantity=min(existing.quantity + quantity, MAX_LINE_QUANTITY),
        )
        self._lines[index] = line
        return line

    def update_quantity(self, item_id: MenuItemId, quantity: int) -> None:
        index = self._index_of(item_id)
        if index is None:
            return
        if quantity <= 0:
            del self._lines[index]
            return
        self._lines[index] = CartLine(
            item=self._lines[index].item,
            quantity=min(quantity, MAX_LINE_QUANTITY),
        )

    def increment(self, item_id: MenuItemId) -> None:
        line = self.get_line(item_id)
        if line is not None and line.quantity < MAX_LINE_QUANTITY:
            self.update_quantity(item_id, line.quantity + 1)

    def decrement(self, item_id: MenuItemId) -> None:
        line = self.get_line(item_id)
        if line is not None:
            self.update_quantity(item_id, line.quantity - 1)

    def remove(self, item_id: MenuItemId) -> None:
        self._lines = [line for line in self._lines if line.item.item_id != item_id]

    def clear(self) -> None:
        self._lines = []

    def get_line(self, item_id: MenuItemId) -> CartLine | None:
        index = self._index_of(item_id)
        if index is None:
            return None
        return self._lines[index]

    def _index_of(self, item_id: MenuItemId) -> int | None:
        for index, line in enumerate(self._lines):
            if line.item.item_id == item_id:
                return index
        return None


class CrossRestaurantConflictError(Exception):
    def __init__(self, message: str, cart_restaurant_id: str, item_restaurant_id: str) -> None:
        super().__init__(message)
        self.details = {
            "cartRestaurantId": cart_restaurant_id,
            "itemRestaurantId": item_restaurant_id,
        }


class InvalidQuantityError(Exception):
    pass
