from datetime import UTC, datetime
from typing import Any, Protocol

import httpx
import structlog

from app.infra.db.models import Order

logger = structlog.get_logger()

EMBED_COLOR = 0x5865F2
EMBED_FIELD_LIMIT = 1024


class OrderNotifier(Protocol):
    async def order_submitted(self, order: Order) -> None: ...


class NoopOrderNotifier:
    async def order_submitted(self, order: Order) -> None:
        _ = order
        return None


def _field(name: str, value: str, inline: bool = False) -> dict[str, Any]:
    text = value.strip() or "-"
    if len(text) > EMBED_FIELD_LIMIT:
        text = text[: EMBED_FIELD_LIMIT - 3] + "..."
    return {"name": name, "value": text, "inline": inline}


def build_order_embed_payload(order: Order) -> dict[str, Any]:
    submitted_at = order.created_at or datetime.now(UTC)
    return {
        "embeds": [
            {
                "title": f"New order #{order.id}",
                "description": f"Order from {order.name}",
                "color": EMBED_COLOR,
                "fields": [
                    _field("Name", order.name, inline=True),
                    _field("WhatsApp", order.contact, inline=True),
                    _field("Category", order.service_category, inline=True),
                    _field("Service", order.sub_service, inline=True),
                    _field("Deadline", order.deadline, inline=True),
                    _field("Budget", order.budget, inline=True),
                    _field("Details", order.topic),
                ],
                "footer": {"text": "Order intake"},
                "timestamp": submitted_at.isoformat(),
            }
        ]
    }


class DiscordOrderNotifier:
    """Posts an embed for every submitted order to a Discord webhook."""

    def __init__(
        self,
        webhook_url: str,
        timeout_seconds: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.webhook_url = webhook_url
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def order_submitted(self, order: Order) -> None:
        payload = build_order_embed_payload(order)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.post(self.webhook_url, json=payload)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("discord.webhook_failed", order_id=order.id, error=str(exc))
            return
        logger.info("discord.webhook_sent", order_id=order.id)
