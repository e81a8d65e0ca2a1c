"""Outbound notifications about new orders."""

from app.infra.notifications.discord import (
    DiscordOrderNotifier,
    NoopOrderNotifier,
    OrderNotifier,
)

__all__ = ["DiscordOrderNotifier", "NoopOrderNotifier", "OrderNotifier"]
