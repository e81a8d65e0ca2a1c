from collections.abc import Mapping
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.enums import OrderStatus
from app.infra.db.models import Order
from app.infra.db.repositories import OrderRepository
from app.infra.notifications import NoopOrderNotifier, OrderNotifier
from app.infra.realtime.events import RealtimeTopic
from app.infra.realtime.publisher import NoopRealtimePublisher, RealtimePublisher
from app.services.errors import OrderNotFoundError

logger = structlog.get_logger()


class OrderService:
    def __init__(
        self,
        session: AsyncSession,
        orders: OrderRepository | None = None,
        realtime: RealtimePublisher | None = None,
        notifier: OrderNotifier | None = None,
    ) -> None:
        self.session = session
        self.orders = orders or OrderRepository(session)
        self.realtime = realtime or NoopRealtimePublisher()
        self.notifier = notifier or NoopOrderNotifier()

    async def submit_order(self, fields: Mapping[str, Any]) -> Order:
        order = await self.orders.create(fields)
        await self.session.commit()
        await self.session.refresh(order)
        logger.info(
            "orders.submitted",
            order_id=order.id,
            service_category=order.service_category,
            sub_service=order.sub_service,
        )
        await self._emit_orders_changed()
        await self.notifier.order_submitted(order)
        return order

    async def list_orders(self, status_filter: OrderStatus | None = None) -> list[Order]:
        return await self.orders.list_all(status_filter=status_filter)

    async def get_order(self, order_id: int) -> Order:
        return await self._get_order_or_raise(order_id)

    async def update_order(self, order_id: int, changes: Mapping[str, Any]) -> Order:
        order = await self._get_order_or_raise(order_id)
        await self.orders.update(order, changes)
        await self.session.commit()
        await self.session.refresh(order)
        await self._emit_orders_changed()
        return order

    async def delete_order(self, order_id: int) -> None:
        order = await self._get_order_or_raise(order_id)
        await self.orders.delete(order)
        await self.session.commit()
        await self._emit_orders_changed()

    async def _get_order_or_raise(self, order_id: int) -> Order:
        order = await self.orders.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    async def _emit_orders_changed(self) -> None:
        await self.realtime.notify(RealtimeTopic.ORDERS_UPDATED)
        await self.realtime.notify(RealtimeTopic.STATS_UPDATED)
