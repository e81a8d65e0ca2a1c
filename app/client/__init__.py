"""Admin-side realtime subscriber and query cache."""

from app.client.cache import QueryCache
from app.client.subscriber import RealtimeSubscriber, SubscriberState

__all__ = ["QueryCache", "RealtimeSubscriber", "SubscriberState"]
