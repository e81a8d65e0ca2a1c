import asyncio
import json
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from enum import Enum
from typing import Protocol

import structlog
from websockets.asyncio.client import connect
from websockets.exceptions import ConnectionClosed, WebSocketException

from app.client.cache import QueryCache
from app.infra.realtime.events import RealtimeTopic

logger = structlog.get_logger()

DEFAULT_RECONNECT_DELAY_SECONDS = 3.0

ADMIN_PROJECTS_QUERY = "/api/v1/admin/projects"
PUBLIC_PROJECTS_QUERY = "/api/v1/projects"
ADMIN_ORDERS_QUERY = "/api/v1/admin/orders"
ADMIN_SETTINGS_QUERY = "/api/v1/admin/settings"
ADMIN_STATS_QUERY = "/api/v1/admin/stats"

# Stats are derived from projects and orders, so both topics also stale them.
TOPIC_INVALIDATIONS: dict[RealtimeTopic, tuple[str, ...]] = {
    RealtimeTopic.PROJECTS_UPDATED: (
        ADMIN_PROJECTS_QUERY,
        PUBLIC_PROJECTS_QUERY,
        ADMIN_STATS_QUERY,
    ),
    RealtimeTopic.ORDERS_UPDATED: (ADMIN_ORDERS_QUERY, ADMIN_STATS_QUERY),
    RealtimeTopic.SETTINGS_UPDATED: (ADMIN_SETTINGS_QUERY,),
    RealtimeTopic.STATS_UPDATED: (ADMIN_STATS_QUERY,),
}


class SubscriberState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"
    STOPPED = "stopped"


class SubscriberConnection(Protocol):
    def __aiter__(self) -> AsyncIterator[str | bytes]: ...

    async def close(self) -> None: ...


Connector = Callable[[str], Awaitable[SubscriberConnection]]


class RealtimeSubscriber:
    """Keeps one websocket open to the hub and stales cache entries per topic.

    A closed connection is retried after a fixed delay until ``stop`` is called.
    """

    def __init__(
        self,
        url: str,
        cache: QueryCache,
        *,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY_SECONDS,
        headers: Mapping[str, str] | None = None,
        connector: Connector | None = None,
    ) -> None:
        self.url = url
        self.cache = cache
        self.reconnect_delay = reconnect_delay
        self.headers = dict(headers or {})
        self.state = SubscriberState.IDLE
        self._connector = connector or self._default_connector
        self._connection: SubscriberConnection | None = None
        self._task: asyncio.Task[None] | None = None
        self._stopping = False

    async def _default_connector(self, url: str) -> SubscriberConnection:
        return await connect(url, additional_headers=self.headers)

    def start(self) -> None:
        if self._task is not None and not self._task.done():
            return
        self._stopping = False
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        self._stopping = True
        self.state = SubscriberState.STOPPED

        connection = self._connection
        self._connection = None
        if connection is not None:
            await connection.close()

        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    def handle_message(self, raw_message: str | bytes) -> RealtimeTopic | None:
        try:
            if isinstance(raw_message, bytes):
                raw_message = raw_message.decode("utf-8")
            message = json.loads(raw_message)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("subscriber.malformed_message", error=str(exc))
            return None

        if not isinstance(message, dict):
            logger.warning("subscriber.malformed_message", error="expected object")
            return None

        try:
            topic = RealtimeTopic(message.get("type"))
        except ValueError:
            logger.debug("subscriber.unknown_topic", topic=message.get("type"))
            return None

        logger.info("subscriber.received", topic=topic.value)
        for query_key in TOPIC_INVALIDATIONS[topic]:
            self.cache.invalidate(query_key)
        return topic

    async def _run(self) -> None:
        while not self._stopping:
            self.state = SubscriberState.CONNECTING
            try:
                connection = await self._connector(self.url)
                await self._consume(connection)
            except (OSError, TimeoutError, WebSocketException) as exc:
                logger.warning("subscriber.connect_failed", url=self.url, error=str(exc))
            except Exception:
                logger.exception("subscriber.cycle_failed", url=self.url)

            if self._stopping:
                break
            self.state = SubscriberState.CLOSED
            logger.info("subscriber.reconnect_scheduled", delay=self.reconnect_delay)
            await asyncio.sleep(self.reconnect_delay)

    async def _consume(self, connection: SubscriberConnection) -> None:
        self._connection = connection
        self.state = SubscriberState.OPEN
        logger.info("subscriber.connected", url=self.url)
        try:
            async for raw_message in connection:
                self.handle_message(raw_message)
        except ConnectionClosed as exc:
            logger.warning("subscriber.connection_error", error=str(exc))
        finally:
            if self._connection is connection:
                self._connection = None
                await connection.close()
        logger.info("subscriber.disconnected", url=self.url)
