from pydantic import BaseModel


class DashboardStatsResponse(BaseModel):
    total_projects: int
    total_orders: int
    pending_orders: int
    completed_orders: int
