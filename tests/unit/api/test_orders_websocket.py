from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from foodorder.api.main import app

CUSTOMER = {"X-User-Id": "usr_ws", "X-User-Name": "Luis"}


@pytest.fixture
def client(monkeypatch) -> Iterator[TestClient]:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("REDIS_URL", raising=False)
    with TestClient(app) as test_client:
        yield test_client


def _place_order(client: TestClient) -> str:
    session_id = client.post("/v1/sessions").json()["sessionId"]
    client.post(f"/v1/sessions/{session_id}/cart/items", json={"itemId": "dsh_004"})
    response = client.post(
        f"/v1/sessions/{session_id}/checkout",
        json={"deliveryAddress": "Calle 5 de Mayo 10"},
        headers=CUSTOMER,
    )
    assert response.status_code == 201
    return response.json()["orderId"]


def test_customer_view_receives_fresh_snapshot_after_checkout(client: TestClient) -> None:
    with client.websocket_connect("/ws/orders?user_id=usr_ws") as websocket:
        initial = websocket.receive_json()
        assert initial == {"type": "orders.snapshot", "view": "customer", "orders": []}

        order_id = _place_order(client)

        placed = websocket.receive_json()
        assert [order["orderId"] for order in placed["orders"]] == [order_id]
        assert placed["orders"][0]["status"] == "pending"


def test_restaurant_view_follows_status_changes(client: TestClient) -> None:
    with client.websocket_connect("/ws/orders?restaurant_id=rst_002") as websocket:
        assert websocket.receive_json()["view"] == "restaurant"

        order_id = _place_order(client)
        websocket.receive_json()

        client.post(f"/v1/orders/{order_id}/status", json={"status": "preparing"})

        changed = websocket.receive_json()
        assert changed["orders"][0]["orderId"] == order_id
        assert changed["orders"][0]["statusLabel"] == "En preparación"


@pytest.mark.parametrize(
    "query",
    ["", "?user_id=usr_ws&restaurant_id=rst_001"],
)
def test_view_requires_exactly_one_scope(client: TestClient, query: str) -> None:
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect(f"/ws/orders{query}") as websocket:
            websocket.receive_json()

    assert exc_info.value.code == 1008
