from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field


class DishResponse(BaseModel):
    itemId: str
    restaurantId: str
    restaurantName: str
    name: str
    description: str | None = None
    category: str | None = None
    dietaryTags: list[str] = Field(default_factory=list)
    ingredients: list[str] = Field(default_factory=list)
    price: Decimal
    currency: str
    imageUrl: str = ""


class MenuResponse(BaseModel):
    restaurantId: str
    items: list[DishResponse] = Field(default_factory=list)


class CartLineResponse(BaseModel):
    itemId: str
    name: str
    imageUrl: str = ""
    quantity: int
    unitPrice: Decimal
    lineTotal: Decimal


class CartResponse(BaseModel):
    sessionId: str
    restaurantId: str | None = None
    restaurantName: str | None = None
    lines: list[CartLineResponse] = Field(default_factory=list)
    itemCount: int
    total: Decimal
    currency: str


class OrderItemResponse(BaseModel):
    dishId: str
    dishName: str
    dishImageUrl: str = ""
    quantity: int
    price: Decimal
    subtotal: Decimal


class OrderResponse(BaseModel):
    orderId: str
    userId: str
    userName: str
    userEmail: str
    restaurantId: str
    restaurantName: str
    items: list[OrderItemResponse] = Field(default_factory=list)
    subtotal: Decimal
    deliveryFee: Decimal
    total: Decimal
    currency: str
    deliveryAddress: str
    deliveryInstructions: str = ""
    paymentMethod: str
    status: str
    statusLabel: str
    createdAt: int | None = None
    updatedAt: int | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse] = Field(default_factory=list)
