from __future__ import annotations

import json
import sys
import time
from pathlib import Path
from uuid import uuid4

from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from foodorder.api.main import app
from foodorder.infrastructure.cache.redis_client import get_redis_client


def _pull_event_types(pubsub, count: int, timeout_seconds: float = 2.0) -> list[str]:
    deadline = time.time() + timeout_seconds
    event_types: list[str] = []
    while time.time() < deadline and len(event_types) < count:
        message = pubsub.get_message(ignore_subscribe_messages=True, timeout=0.2)
        if not message or message.get("type") != "message":
            time.sleep(0.05)
            continue
        payload = message.get("data")
        raw = payload.decode("utf-8") if isinstance(payload, bytes) else str(payload)
        event_types.append(json.loads(raw)["event_type"])
    return event_types


def _place_order(client: TestClient, user_id: str) -> str:
    session_id = client.post("/v1/sessions").json()["sessionId"]
    client.post(f"/v1/sessions/{session_id}/cart/items", json={"itemId": "dsh_002"})
    response = client.post(
        f"/v1/sessions/{session_id}/checkout",
        json={"deliveryAddress": "Av. Juárez 4"},
        headers={"X-User-Id": user_id},
    )
    assert response.status_code == 201
    return response.json()["orderId"]


def test_order_changes_are_published_on_customer_channel() -> None:
    user_id = f"usr_{uuid4().hex[:8]}"
    pubsub = get_redis_client().pubsub()
    pubsub.subscribe(f"orders:user:{user_id}")
    pubsub.get_message(timeout=0.5)

    with TestClient(app) as client:
        order_id = _place_order(client, user_id)
        cancel_response = client.post(
            f"/v1/orders/{order_id}/cancel",
            headers={"X-User-Id": user_id},
        )
        assert cancel_response.status_code == 200

    assert _pull_event_types(pubsub, count=2) == ["order.placed", "order.status_changed"]


def test_customer_view_rematerialises_over_redis() -> None:
    user_id = f"usr_{uuid4().hex[:8]}"
    with TestClient(app) as client:
        with client.websocket_connect(f"/ws/orders?user_id={user_id}") as websocket:
            assert websocket.receive_json()["orders"] == []

            order_id = _place_order(client, user_id)

            snapshot = websocket.receive_json()
            assert [order["orderId"] for order in snapshot["orders"]] == [order_id]
