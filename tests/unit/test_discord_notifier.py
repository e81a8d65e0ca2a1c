import json

import httpx
import pytest
from fakes import FakeOrder

from app.infra.notifications.discord import (
    DiscordOrderNotifier,
    build_order_embed_payload,
)

WEBHOOK_URL = "https://discord.example.com/api/webhooks/1/token"


def _order() -> FakeOrder:
    return FakeOrder(
        id=12,
        name="Rina Putri",
        contact="081234567890",
        service_category="academicHelp",
        sub_service="ppt",
        topic="Slides for a thesis defense, 15 pages",
        deadline="Monday",
        budget="Rp 100.000",
    )


def test_embed_payload_lists_order_fields() -> None:
    payload = build_order_embed_payload(_order())

    embed = payload["embeds"][0]
    fields = {field["name"]: field["value"] for field in embed["fields"]}
    assert embed["title"] == "New order #12"
    assert fields["WhatsApp"] == "081234567890"
    assert fields["Service"] == "ppt"


def test_long_details_are_truncated() -> None:
    order = _order()
    order.topic = "x" * 5000

    payload = build_order_embed_payload(order)

    details = payload["embeds"][0]["fields"][-1]["value"]
    assert len(details) == 1024
    assert details.endswith("...")


@pytest.mark.asyncio
async def test_notifier_posts_embed_to_webhook() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(204)

    notifier = DiscordOrderNotifier(WEBHOOK_URL, transport=httpx.MockTransport(handler))
    await notifier.order_submitted(_order())

    assert len(requests) == 1
    assert str(requests[0].url) == WEBHOOK_URL
    assert json.loads(requests[0].content)["embeds"][0]["title"] == "New order #12"


@pytest.mark.asyncio
async def test_notifier_swallows_webhook_failures() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    notifier = DiscordOrderNotifier(WEBHOOK_URL, transport=httpx.MockTransport(handler))

    await notifier.order_submitted(_order())
