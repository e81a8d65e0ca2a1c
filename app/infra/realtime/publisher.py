from typing import Any, Protocol

from app.infra.realtime.events import RealtimeTopic


class RealtimePublisher(Protocol):
    async def notify(self, topic: RealtimeTopic, payload: Any = None) -> None: ...


class NoopRealtimePublisher:
    async def notify(self, topic: RealtimeTopic, payload: Any = None) -> None:
        _ = topic
        _ = payload
        return None
