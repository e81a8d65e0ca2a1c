from collections.abc import Collection

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.db import get_db_session
from app.core.rate_limit import InMemoryRateLimiter, RateLimitRule
from app.infra.db.models import AdminUser
from app.infra.realtime.publisher import RealtimePublisher
from app.services.admin_auth_service import AdminAuthService
from app.services.errors import AdminAuthenticationError

settings = get_settings()
rate_limiter = InMemoryRateLimiter()


def get_realtime_publisher(request: Request) -> RealtimePublisher | None:
    return getattr(request.app.state, "realtime_hub", None)


def client_address(
    request: Request, trusted_proxies: Collection[str] | None = None
) -> str:
    if trusted_proxies is None:
        trusted_proxies = settings.trusted_proxies
    peer = request.client.host if request.client is not None else "unknown"
    if peer not in trusted_proxies:
        return peer

    # Walk back from the nearest hop; the first untrusted entry is the client.
    hops = [
        hop.strip()
        for hop in request.headers.get("X-Forwarded-For", "").split(",")
        if hop.strip()
    ]
    for hop in reversed(hops):
        if hop not in trusted_proxies:
            return hop
    return peer


async def enforce_rate_limit(request: Request, scope: str, rule: RateLimitRule) -> None:
    key = f"{scope}:{client_address(request)}"
    decision = await rate_limiter.allow(key, rule)
    if not decision.allowed:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests. Please try again later.",
            headers={"Retry-After": str(decision.retry_after_seconds)},
        )


async def get_admin_auth_service(
    session: AsyncSession = Depends(get_db_session),
) -> AdminAuthService:
    return AdminAuthService(session=session)


async def get_current_admin(
    request: Request,
    service: AdminAuthService = Depends(get_admin_auth_service),
) -> AdminUser:
    session_token = request.cookies.get(settings.admin_session_cookie_name)
    try:
        return await service.authenticate(session_token)
    except AdminAuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc
