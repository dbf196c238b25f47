from __future__ import annotations

from foodorder.application.dto.responses import CartLineResponse, CartResponse
from foodorder.domain.cart.entities import Cart
from foodorder.domain.common.ids import SessionId


def to_cart_response(session_id: SessionId, cart: Cart) -> CartResponse:
    total = cart.total
    return CartResponse(
        sessionId=str(session_id),
        restaurantId=str(cart.restaurant_id) if cart.restaurant_id is not None else None,
        restaurantName=cart.restaurant_name,
        lines=[
            CartLineResponse(
                itemId=str(line.item.item_id),
                name=line.item.name,
                imageUrl=line.item.image_url,
                quantity=line.quantity,
                unitPrice=line.item.price_money.to_decimal(),
                lineTotal=line.line_total.to_decimal(),
            )
            for line in cart.lines
        ],
        itemCount=cart.item_count,
        total=total.to_decimal(),
        currency=total.currency,
    )
