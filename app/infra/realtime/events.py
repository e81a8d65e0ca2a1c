import json
from enum import Enum
from typing import Any


class RealtimeTopic(str, Enum):
    PROJECTS_UPDATED = "projects_updated"
    ORDERS_UPDATED = "orders_updated"
    SETTINGS_UPDATED = "settings_updated"
    STATS_UPDATED = "stats_updated"


def encode_notification(topic: RealtimeTopic, payload: Any = None) -> str:
    message: dict[str, Any] = {"type": topic.value}
    if payload is not None:
        message["data"] = payload
    return json.dumps(message, separators=(",", ":"), default=str)
