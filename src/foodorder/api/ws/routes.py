from __future__ import annotations

import asyncio
import logging
from contextlib import suppress

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from foodorder.api.container import AppContainer
from foodorder.application.mappers.order_mapper import to_order_list_response
from foodorder.application.observation.order_views import LiveOrderView, OrderSubscriptionError
from foodorder.domain.common.ids import RestaurantId, UserId

router = APIRouter()
logger = logging.getLogger(__name__)

SNAPSHOT_MESSAGE_TYPE = "orders.snapshot"


async def _send_snapshots(websocket: WebSocket, view: LiveOrderView) -> None:
    async for orders in view.snapshots():
        payload = to_order_list_response(orders).model_dump(mode="json")
        await websocket.send_json({"type": SNAPSHOT_MESSAGE_TYPE, "view": view.kind.value, **payload})


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    while True:
        await websocket.receive_text()


@router.websocket("/ws/orders")
async def orders_stream(websocket: WebSocket) -> None:
    user_id = websocket.query_params.get("user_id")
    restaurant_id = websocket.query_params.get("restaurant_id")
    if bool(user_id) == bool(restaurant_id):
        await websocket.close(
            code=1008,
            reason="exactly one of user_id or restaurant_id query parameters is required",
        )
        return

    container: AppContainer = websocket.app.state.container
    if user_id:
        view = LiveOrderView.for_customer(
            container.order_repository,
            container.subscriber,
            UserId(user_id),
        )
    else:
        view = LiveOrderView.for_restaurant(
            container.order_repository,
            container.subscriber,
            RestaurantId(str(restaurant_id)),
        )

    await websocket.accept()
    try:
        async with view:
            sender = asyncio.create_task(_send_snapshots(websocket, view))
            receiver = asyncio.create_task(_wait_for_disconnect(websocket))
            done, pending = await asyncio.wait(
                {sender, receiver},
                return_when=asyncio.FIRST_COMPLETED,
            )
            for task in pending:
                task.cancel()
                with suppress(asyncio.CancelledError):
                    await task
            for task in done:
                task.result()
    except WebSocketDisconnect:
        logger.debug("ws_client_disconnected", extra={"channel": view.channel})
    except OrderSubscriptionError:
        logger.warning("ws_subscription_failed", extra={"channel": view.channel})
        await websocket.close(code=1011, reason="order subscription failed")
