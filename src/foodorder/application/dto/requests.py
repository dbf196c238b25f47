from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from foodorder.domain.order.entities import DEFAULT_PAYMENT_METHOD


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class AddCartItemRequest(CamelBaseModel):
    item_id: str
    quantity: int = 1


class UpdateCartItemRequest(CamelBaseModel):
    quantity: int


class CheckoutRequest(CamelBaseModel):
    delivery_address: str = ""
    delivery_instructions: str = ""
    payment_method: str = DEFAULT_PAYMENT_METHOD


class UpdateOrderStatusRequest(CamelBaseModel):
    status: str
