from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from fastapi import Request
from opentelemetry import trace

from foodorder.api.middleware.request_id import get_request_id
from foodorder.application.ports.cache import CacheStore
from foodorder.application.ports.publisher import EventPublisher, EventSubscriber
from foodorder.application.ports.repositories import DishRepository, OrderRepository
from foodorder.application.session import SessionRegistry
from foodorder.application.use_cases.order_events import TraceContext
from foodorder.domain.common.money import DEFAULT_CURRENCY, Money
from foodorder.domain.order.lifecycle import TransitionPolicy
from foodorder.infrastructure.cache.cache_store import RedisCacheStore
from foodorder.infrastructure.db.repositories.dish_repo import SqlAlchemyDishRepository
from foodorder.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository
from foodorder.infrastructure.memory.cache_store import InMemoryCacheStore
from foodorder.infrastructure.memory.repositories import (
    InMemoryDishRepository,
    InMemoryOrderRepository,
)
from foodorder.infrastructure.messaging.memory_bus import InMemoryEventBus
from foodorder.infrastructure.messaging.redis_publisher import RedisEventPublisher
from foodorder.infrastructure.messaging.redis_subscriber import RedisEventSubscriber
from foodorder.tools.seed import demo_menu_items

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    sessions: SessionRegistry
    dish_repository: DishRepository
    order_repository: OrderRepository
    publisher: EventPublisher
    subscriber: EventSubscriber
    cache: CacheStore
    delivery_fee: Money
    transition_policy: TransitionPolicy = TransitionPolicy.PERMISSIVE
    menu_cache_ttl_seconds: int = 300


def _transition_policy() -> TransitionPolicy:
    raw_value = os.getenv("ORDER_TRANSITION_POLICY", TransitionPolicy.PERMISSIVE.value)
    try:
        return TransitionPolicy(raw_value.strip().lower())
    except ValueError as exc:
        raise RuntimeError(f"unknown ORDER_TRANSITION_POLICY: {raw_value}") from exc


def build_container() -> AppContainer:
    """Wire stores from the environment; anything unset falls back to memory."""
    currency = os.getenv("CURRENCY", DEFAULT_CURRENCY).strip().upper()
    delivery_fee = Money(
        amount_cents=int(os.getenv("DELIVERY_FEE_CENTS", "3000")),
        currency=currency,
    )

    dish_repository: DishRepository
    order_repository: OrderRepository
    if os.getenv("DATABASE_URL"):
        dish_repository = SqlAlchemyDishRepository()
        order_repository = SqlAlchemyOrderRepository()
    else:
        logger.warning("record_store_in_memory", extra={"reason": "DATABASE_URL missing"})
        dish_repository = InMemoryDishRepository(demo_menu_items(currency))
        order_repository = InMemoryOrderRepository()

    publisher: EventPublisher
    subscriber: EventSubscriber
    cache: CacheStore
    if os.getenv("REDIS_URL"):
        publisher = RedisEventPublisher()
        subscriber = RedisEventSubscriber()
        cache = RedisCacheStore()
    else:
        logger.warning("change_feed_in_memory", extra={"reason": "REDIS_URL missing"})
        bus = InMemoryEventBus()
        publisher = bus
        subscriber = bus
        cache = InMemoryCacheStore()

    return AppContainer(
        sessions=SessionRegistry(currency=currency),
        dish_repository=dish_repository,
        order_repository=order_repository,
        publisher=publisher,
        subscriber=subscriber,
        cache=cache,
        delivery_fee=delivery_fee,
        transition_policy=_transition_policy(),
        menu_cache_ttl_seconds=int(os.getenv("MENU_CACHE_TTL_SECONDS", "300")),
    )


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def current_trace_context() -> TraceContext:
    span_context = trace.get_current_span().get_span_context()
    trace_id = format(span_context.trace_id, "032x") if span_context.is_valid else None
    return TraceContext(trace_id=trace_id, request_id=get_request_id())
