from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import enforce_rate_limit, get_realtime_publisher
from app.core.config import get_settings
from app.core.db import get_db_session
from app.core.rate_limit import RateLimitRule
from app.infra.notifications import DiscordOrderNotifier, OrderNotifier
from app.infra.realtime.publisher import RealtimePublisher
from app.schemas.common import ApiResponse
from app.schemas.order import OrderFormRequest
from app.schemas.project import ProjectResponse
from app.services.order_service import OrderService
from app.services.project_service import ProjectService
from app.services.site_setting_service import SiteSettingService

router = APIRouter()
settings = get_settings()
order_rule = RateLimitRule(
    limit=settings.order_rate_limit,
    window_seconds=settings.order_rate_window_seconds,
)


def get_order_notifier() -> OrderNotifier | None:
    if not settings.discord_webhook_url:
        return None
    return DiscordOrderNotifier(
        webhook_url=settings.discord_webhook_url,
        timeout_seconds=settings.discord_timeout_seconds,
    )


async def get_order_service(
    session: AsyncSession = Depends(get_db_session),
    realtime: RealtimePublisher | None = Depends(get_realtime_publisher),
    notifier: OrderNotifier | None = Depends(get_order_notifier),
) -> OrderService:
    return OrderService(session=session, realtime=realtime, notifier=notifier)


async def get_project_service(
    session: AsyncSession = Depends(get_db_session),
) -> ProjectService:
    return ProjectService(session=session)


async def get_site_setting_service(
    session: AsyncSession = Depends(get_db_session),
) -> SiteSettingService:
    return SiteSettingService(session=session)


@router.get("/projects", response_model=list[ProjectResponse])
async def list_projects(
    service: ProjectService = Depends(get_project_service),
) -> list[ProjectResponse]:
    projects = await service.list_projects()
    return [ProjectResponse.model_validate(project) for project in projects]


@router.get("/settings", response_model=dict[str, str])
async def get_public_settings(
    service: SiteSettingService = Depends(get_site_setting_service),
) -> dict[str, str]:
    return await service.get_public_settings()


@router.post("/orders", response_model=ApiResponse)
async def submit_order(
    payload: OrderFormRequest,
    request: Request,
    service: OrderService = Depends(get_order_service),
) -> ApiResponse:
    await enforce_rate_limit(request, "orders", order_rule)
    await service.submit_order(payload.model_dump(mode="json"))
    return ApiResponse(
        success=True,
        message="Order received. We will contact you on WhatsApp shortly.",
    )
