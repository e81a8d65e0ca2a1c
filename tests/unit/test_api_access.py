import pytest
from fastapi.testclient import TestClient
from fakes import order_form
from starlette.websockets import WebSocketDisconnect

from app.core.config import get_settings
from app.infra.realtime import BroadcastHub
from app.main import app

client = TestClient(app)


def test_root_and_health() -> None:
    assert client.get("/").json()["service"] == "portfolio-order-intake"

    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "realtime_sessions": 0}
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Request-ID"]


@pytest.mark.parametrize(
    "path",
    ["/api/v1/admin/stats", "/api/v1/admin/orders", "/api/v1/auth/me"],
)
def test_admin_routes_require_session(path: str) -> None:
    response = client.get(path)

    assert response.status_code == 401


def test_invalid_order_is_rejected_before_persisting() -> None:
    response = client.post("/api/v1/orders", json=order_form(topic="short"))

    assert response.status_code == 422


def test_socket_without_session_is_refused() -> None:
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/ws"):
            pass

    assert exc_info.value.code == 1008


def test_socket_with_forged_session_is_refused() -> None:
    cookie_name = get_settings().admin_session_cookie_name

    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect(
            "/ws", headers={"cookie": f"{cookie_name}=forged.token"}
        ):
            pass

    assert exc_info.value.code == 1008


@pytest.fixture
def open_socket_hub(monkeypatch: pytest.MonkeyPatch) -> BroadcastHub:
    hub = BroadcastHub()
    monkeypatch.setattr(get_settings(), "realtime_require_auth", False)
    monkeypatch.setattr(app.state, "realtime_hub", hub, raising=False)
    return hub


def test_socket_registers_answers_ping_and_unregisters_on_close(
    open_socket_hub: BroadcastHub,
) -> None:
    with client.websocket_connect("/ws") as websocket:
        websocket.send_bytes(b"\x01\x02")
        websocket.send_text("ping")
        assert websocket.receive_json() == {"type": "pong"}

        websocket.send_text('{"type": "ping"}')
        assert websocket.receive_json() == {"type": "pong"}
        assert open_socket_hub.session_count == 1

    assert open_socket_hub.session_count == 0
