from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.enums import OrderStatus
from app.infra.db.repositories import OrderRepository, ProjectRepository


@dataclass(frozen=True, slots=True)
class DashboardStats:
    total_projects: int
    total_orders: int
    pending_orders: int
    completed_orders: int


class DashboardService:
    def __init__(
        self,
        session: AsyncSession,
        projects: ProjectRepository | None = None,
        orders: OrderRepository | None = None,
    ) -> None:
        self.session = session
        self.projects = projects or ProjectRepository(session)
        self.orders = orders or OrderRepository(session)

    async def get_stats(self) -> DashboardStats:
        return DashboardStats(
            total_projects=await self.projects.count(),
            total_orders=await self.orders.count(),
            pending_orders=await self.orders.count(OrderStatus.PENDING),
            completed_orders=await self.orders.count(OrderStatus.COMPLETED),
        )
