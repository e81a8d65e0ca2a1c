import asyncio
from typing import Any

import structlog
from fastapi import WebSocket
from starlette.websockets import WebSocketState

from app.infra.realtime.events import RealtimeTopic, encode_notification

logger = structlog.get_logger()

DEFAULT_SEND_TIMEOUT_SECONDS = 5.0


def _is_writable(websocket: WebSocket) -> bool:
    return (
        websocket.client_state == WebSocketState.CONNECTED
        and websocket.application_state == WebSocketState.CONNECTED
    )


class BroadcastHub:
    """In-process registry of admin websocket sessions with topic fanout.

    Delivery is best-effort and at-most-once: sessions that are not writable
    are skipped, and a session whose send fails or does not finish within
    ``send_timeout`` seconds is dropped from the registry.
    """

    def __init__(self, send_timeout: float = DEFAULT_SEND_TIMEOUT_SECONDS) -> None:
        self.send_timeout = send_timeout
        self._sessions: set[WebSocket] = set()
        self._lock = asyncio.Lock()

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    def is_registered(self, websocket: WebSocket) -> bool:
        return websocket in self._sessions

    async def register(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._sessions.add(websocket)
            total = len(self._sessions)
        logger.info("realtime.session_registered", sessions=total)

    async def unregister(self, websocket: WebSocket) -> None:
        async with self._lock:
            if websocket not in self._sessions:
                return
            self._sessions.discard(websocket)
            total = len(self._sessions)
        logger.info("realtime.session_unregistered", sessions=total)

    async def notify(self, topic: RealtimeTopic, payload: Any = None) -> None:
        data = encode_notification(topic, payload)

        async with self._lock:
            recipients = [ws for ws in self._sessions if _is_writable(ws)]

        # One slow reader must not hold up the others or the caller.
        results = await asyncio.gather(
            *(self._deliver(websocket, data) for websocket in recipients),
            return_exceptions=True,
        )

        stale: list[WebSocket] = []
        for websocket, result in zip(recipients, results):
            if isinstance(result, TimeoutError):
                logger.warning(
                    "realtime.send_timed_out",
                    topic=topic.value,
                    timeout=self.send_timeout,
                )
                stale.append(websocket)
            elif isinstance(result, Exception):
                logger.warning(
                    "realtime.send_failed", topic=topic.value, error=str(result)
                )
                stale.append(websocket)
            elif isinstance(result, BaseException):
                raise result

        for websocket in stale:
            await self.unregister(websocket)

        logger.debug(
            "realtime.notified",
            topic=topic.value,
            delivered=len(recipients) - len(stale),
        )

    async def _deliver(self, websocket: WebSocket, data: str) -> None:
        await asyncio.wait_for(websocket.send_text(data), timeout=self.send_timeout)
