import json

import structlog
from fastapi import APIRouter, WebSocket
from starlette.websockets import WebSocketDisconnect

from app.core.config import get_settings
from app.core.db import get_session_factory, init_engine
from app.services.admin_auth_service import AdminAuthService
from app.services.errors import AdminAuthenticationError

router = APIRouter()
settings = get_settings()
logger = structlog.get_logger()

PONG_FRAME = json.dumps({"type": "pong"})


def _is_ping(raw_message: str) -> bool:
    if raw_message.strip().lower() == "ping":
        return True
    try:
        message = json.loads(raw_message)
    except json.JSONDecodeError:
        return False
    return isinstance(message, dict) and (
        message.get("action") == "ping" or message.get("type") == "ping"
    )


async def _authenticate(websocket: WebSocket) -> bool:
    session_token = websocket.cookies.get(settings.admin_session_cookie_name)
    if not session_token:
        await websocket.close(code=1008, reason="Admin session required")
        return False

    init_engine()
    async with get_session_factory()() as session:
        try:
            admin = await AdminAuthService(session).authenticate(session_token)
        except AdminAuthenticationError:
            await websocket.close(code=1008, reason="Invalid or expired admin session")
            return False

    structlog.contextvars.bind_contextvars(admin_id=admin.id)
    return True


@router.websocket("/ws")
async def realtime_ws(websocket: WebSocket) -> None:
    if settings.realtime_require_auth and not await _authenticate(websocket):
        return

    hub = getattr(websocket.app.state, "realtime_hub", None)
    if hub is None:
        await websocket.close(code=1011, reason="Realtime hub not initialized")
        return

    await websocket.accept()
    await hub.register(websocket)
    logger.info("realtime.client_connected")

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                logger.info("realtime.client_disconnected", code=message.get("code"))
                break
            # Binary and other frames carry nothing for the server.
            raw_message = message.get("text")
            if raw_message is not None and _is_ping(raw_message):
                await websocket.send_text(PONG_FRAME)
    except WebSocketDisconnect as exc:
        logger.info("realtime.client_disconnected", code=exc.code)
    except RuntimeError as exc:
        logger.warning("realtime.transport_error", error=str(exc))
    finally:
        await hub.unregister(websocket)
