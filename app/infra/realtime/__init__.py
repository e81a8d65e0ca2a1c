"""Realtime change notifications pushed to admin websocket sessions."""

from app.infra.realtime.events import RealtimeTopic
from app.infra.realtime.hub import BroadcastHub

__all__ = ["BroadcastHub", "RealtimeTopic"]
