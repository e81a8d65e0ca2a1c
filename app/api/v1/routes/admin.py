from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_admin, get_realtime_publisher
from app.core.db import get_db_session
from app.domain.enums import OrderStatus
from app.infra.realtime.publisher import RealtimePublisher
from app.schemas.common import ApiResponse
from app.schemas.order import OrderResponse, OrderUpdateRequest
from app.schemas.project import (
    ProjectCreateRequest,
    ProjectResponse,
    ProjectUpdateRequest,
)
from app.schemas.site_setting import SiteSettingResponse, SiteSettingUpdateRequest
from app.schemas.stats import DashboardStatsResponse
from app.services.dashboard_service import DashboardService
from app.services.errors import (
    OrderNotFoundError,
    ProjectNotFoundError,
    SettingNotFoundError,
)
from app.services.order_service import OrderService
from app.services.project_service import ProjectService
from app.services.site_setting_service import SiteSettingService

router = APIRouter(dependencies=[Depends(get_current_admin)])


async def get_project_service(
    session: AsyncSession = Depends(get_db_session),
    realtime: RealtimePublisher | None = Depends(get_realtime_publisher),
) -> ProjectService:
    return ProjectService(session=session, realtime=realtime)


async def get_order_service(
    session: AsyncSession = Depends(get_db_session),
    realtime: RealtimePublisher | None = Depends(get_realtime_publisher),
) -> OrderService:
    return OrderService(session=session, realtime=realtime)


async def get_site_setting_service(
    session: AsyncSession = Depends(get_db_session),
    realtime: RealtimePublisher | None = Depends(get_realtime_publisher),
) -> SiteSettingService:
    return SiteSettingService(session=session, realtime=realtime)


async def get_dashboard_service(
    session: AsyncSession = Depends(get_db_session),
) -> DashboardService:
    return DashboardService(session=session)


def _raise_for_service_error(exc: Exception) -> None:
    if isinstance(exc, (ProjectNotFoundError, OrderNotFoundError, SettingNotFoundError)):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if isinstance(exc, ValueError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    raise exc


@router.get("/stats", response_model=DashboardStatsResponse)
async def get_stats(
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardStatsResponse:
    stats = await service.get_stats()
    return DashboardStatsResponse(
        total_projects=stats.total_projects,
        total_orders=stats.total_orders,
        pending_orders=stats.pending_orders,
        completed_orders=stats.completed_orders,
    )


@router.get("/projects", response_model=list[ProjectResponse])
async def list_projects(
    service: ProjectService = Depends(get_project_service),
) -> list[ProjectResponse]:
    projects = await service.list_projects()
    return [ProjectResponse.model_validate(project) for project in projects]


@router.post(
    "/projects",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_project(
    payload: ProjectCreateRequest,
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    project = await service.create_project(payload.model_dump())
    return ProjectResponse.model_validate(project)


@router.get("/projects/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: int,
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    try:
        project = await service.get_project(project_id)
    except ProjectNotFoundError as exc:
        _raise_for_service_error(exc)
    return ProjectResponse.model_validate(project)


@router.patch("/projects/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: int,
    payload: ProjectUpdateRequest,
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    try:
        project = await service.update_project(
            project_id, payload.model_dump(exclude_unset=True)
        )
    except ProjectNotFoundError as exc:
        _raise_for_service_error(exc)
    return ProjectResponse.model_validate(project)


@router.delete("/projects/{project_id}", response_model=ApiResponse)
async def delete_project(
    project_id: int,
    service: ProjectService = Depends(get_project_service),
) -> ApiResponse:
    try:
        await service.delete_project(project_id)
    except ProjectNotFoundError as exc:
        _raise_for_service_error(exc)
    return ApiResponse(success=True, message="Project deleted")


@router.get("/orders", response_model=list[OrderResponse])
async def list_orders(
    status_filter: OrderStatus | None = Query(default=None, alias="status"),
    service: OrderService = Depends(get_order_service),
) -> list[OrderResponse]:
    orders = await service.list_orders(status_filter=status_filter)
    return [OrderResponse.model_validate(order) for order in orders]


@router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    try:
        order = await service.get_order(order_id)
    except OrderNotFoundError as exc:
        _raise_for_service_error(exc)
    return OrderResponse.model_validate(order)


@router.patch("/orders/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: int,
    payload: OrderUpdateRequest,
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    try:
        order = await service.update_order(
            order_id, payload.model_dump(exclude_unset=True)
        )
    except OrderNotFoundError as exc:
        _raise_for_service_error(exc)
    return OrderResponse.model_validate(order)


@router.delete("/orders/{order_id}", response_model=ApiResponse)
async def delete_order(
    order_id: int,
    service: OrderService = Depends(get_order_service),
) -> ApiResponse:
    try:
        await service.delete_order(order_id)
    except OrderNotFoundError as exc:
        _raise_for_service_error(exc)
    return ApiResponse(success=True, message="Order deleted")


@router.get("/settings", response_model=list[SiteSettingResponse])
async def list_settings(
    service: SiteSettingService = Depends(get_site_setting_service),
) -> list[SiteSettingResponse]:
    settings = await service.list_settings()
    return [SiteSettingResponse.model_validate(setting) for setting in settings]


@router.put("/settings/{key}", response_model=SiteSettingResponse)
async def set_setting(
    key: str,
    payload: SiteSettingUpdateRequest,
    service: SiteSettingService = Depends(get_site_setting_service),
) -> SiteSettingResponse:
    try:
        setting = await service.set_setting(key, payload.value)
    except ValueError as exc:
        _raise_for_service_error(exc)
    return SiteSettingResponse.model_validate(setting)


@router.delete("/settings/{key}", response_model=ApiResponse)
async def delete_setting(
    key: str,
    service: SiteSettingService = Depends(get_site_setting_service),
) -> ApiResponse:
    try:
        await service.delete_setting(key)
    except SettingNotFoundError as exc:
        _raise_for_service_error(exc)
    return ApiResponse(success=True, message="Setting deleted")
