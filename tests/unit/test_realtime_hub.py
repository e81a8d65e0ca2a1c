import asyncio
import json

import pytest
from starlette.websockets import WebSocketDisconnect, WebSocketState

from app.infra.realtime.events import RealtimeTopic, encode_notification
from app.infra.realtime.hub import BroadcastHub


class FakeSession:
    def __init__(self, name: str, fail_with: Exception | None = None) -> None:
        self.name = name
        self.fail_with = fail_with
        self.sent: list[str] = []
        self.client_state = WebSocketState.CONNECTED
        self.application_state = WebSocketState.CONNECTED

    async def send_text(self, data: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(data)

    def messages(self) -> list[dict]:
        return [json.loads(raw) for raw in self.sent]


@pytest.mark.asyncio
async def test_notify_reaches_registered_sessions_until_unregistered() -> None:
    hub = BroadcastHub()
    session_a = FakeSession("a")
    session_b = FakeSession("b")
    await hub.register(session_a)
    await hub.register(session_b)

    await hub.notify(RealtimeTopic.ORDERS_UPDATED)

    assert session_a.messages() == [{"type": "orders_updated"}]
    assert session_b.messages() == [{"type": "orders_updated"}]

    await hub.unregister(session_b)
    await hub.notify(RealtimeTopic.STATS_UPDATED)

    assert session_a.messages() == [
        {"type": "orders_updated"},
        {"type": "stats_updated"},
    ]
    assert session_b.messages() == [{"type": "orders_updated"}]


@pytest.mark.asyncio
async def test_registry_membership_reflects_net_effect_of_calls() -> None:
    hub = BroadcastHub()
    session_a = FakeSession("a")
    session_b = FakeSession("b")

    await hub.register(session_a)
    await hub.register(session_a)
    await hub.register(session_b)
    await hub.unregister(session_a)

    assert hub.session_count == 1
    assert not hub.is_registered(session_a)
    assert hub.is_registered(session_b)


@pytest.mark.asyncio
async def test_unregister_is_idempotent() -> None:
    hub = BroadcastHub()
    session_a = FakeSession("a")
    session_b = FakeSession("b")
    await hub.register(session_a)
    await hub.register(session_b)

    await hub.unregister(session_a)
    await hub.unregister(session_a)
    await hub.unregister(FakeSession("never-registered"))

    assert hub.session_count == 1
    assert hub.is_registered(session_b)


@pytest.mark.asyncio
async def test_failing_session_is_dropped_without_blocking_others() -> None:
    hub = BroadcastHub()
    healthy = FakeSession("healthy")
    broken = FakeSession("broken", fail_with=RuntimeError("socket closed"))
    gone = FakeSession("gone", fail_with=WebSocketDisconnect(code=1006))
    await hub.register(broken)
    await hub.register(healthy)
    await hub.register(gone)

    await hub.notify(RealtimeTopic.PROJECTS_UPDATED)

    assert healthy.messages() == [{"type": "projects_updated"}]
    assert not hub.is_registered(broken)
    assert not hub.is_registered(gone)
    assert hub.session_count == 1

    broken.fail_with = None
    await hub.notify(RealtimeTopic.STATS_UPDATED)
    assert broken.sent == []
    assert len(healthy.sent) == 2


class StalledSession(FakeSession):
    """A client that stopped reading, so its sends never complete."""

    async def send_text(self, data: str) -> None:
        await asyncio.Event().wait()


@pytest.mark.asyncio
async def test_stalled_session_does_not_hold_up_others() -> None:
    hub = BroadcastHub(send_timeout=0.05)
    stalled = StalledSession("stalled")
    healthy = FakeSession("healthy")
    await hub.register(stalled)
    await hub.register(healthy)

    await asyncio.wait_for(hub.notify(RealtimeTopic.ORDERS_UPDATED), timeout=1.0)

    assert healthy.messages() == [{"type": "orders_updated"}]
    assert not hub.is_registered(stalled)
    assert hub.is_registered(healthy)


@pytest.mark.asyncio
async def test_non_writable_sessions_are_skipped() -> None:
    hub = BroadcastHub()
    closing = FakeSession("closing")
    closing.client_state = WebSocketState.DISCONNECTED
    await hub.register(closing)

    await hub.notify(RealtimeTopic.SETTINGS_UPDATED)

    assert closing.sent == []


@pytest.mark.asyncio
async def test_messages_arrive_in_notify_order() -> None:
    hub = BroadcastHub()
    session = FakeSession("a")
    await hub.register(session)

    for topic in RealtimeTopic:
        await hub.notify(topic)

    assert [message["type"] for message in session.messages()] == [
        topic.value for topic in RealtimeTopic
    ]


@pytest.mark.asyncio
async def test_notify_without_sessions_is_a_noop() -> None:
    hub = BroadcastHub()
    await hub.notify(RealtimeTopic.ORDERS_UPDATED)
    assert hub.session_count == 0


def test_encode_notification_includes_payload_only_when_given() -> None:
    assert json.loads(encode_notification(RealtimeTopic.ORDERS_UPDATED)) == {
        "type": "orders_updated"
    }
    assert json.loads(
        encode_notification(RealtimeTopic.ORDERS_UPDATED, {"order_id": 7})
    ) == {"type": "orders_updated", "data": {"order_id": 7}}
