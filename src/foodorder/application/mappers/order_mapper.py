from __future__ import annotations

from foodorder.application.dto.responses import (
    OrderItemResponse,
    OrderListResponse,
    OrderResponse,
)
from foodorder.domain.order.entities import Order


def to_order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        orderId=str(order.order_id),
        userId=str(order.user_id),
        userName=order.user_name,
        userEmail=order.user_email,
        restaurantId=str(order.restaurant_id),
        restaurantName=order.restaurant_name,
        items=[
            OrderItemResponse(
                dishId=str(line.dish_id),
                dishName=line.dish_name,
                dishImageUrl=line.dish_image_url,
                quantity=line.quantity,
                price=line.unit_price.to_decimal(),
                subtotal=line.line_total.to_decimal(),
            )
            for line in order.lines
        ],
        subtotal=order.subtotal.to_decimal(),
        deliveryFee=order.delivery_fee.to_decimal(),
        total=order.total.to_decimal(),
        currency=order.total.currency,
        deliveryAddress=order.delivery_address,
        deliveryInstructions=order.delivery_instructions,
        paymentMethod=order.payment_method,
        status=order.status.value,
        statusLabel=order.status.label,
        createdAt=order.created_at,
        updatedAt=order.updated_at,
    )


def to_order_list_response(orders: list[Order]) -> OrderListResponse:
    return OrderListResponse(orders=[to_order_response(order) for order in orders])
