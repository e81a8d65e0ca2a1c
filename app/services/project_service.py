from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.infra.db.models import Project
from app.infra.db.repositories import ProjectRepository
from app.infra.realtime.events import RealtimeTopic
from app.infra.realtime.publisher import NoopRealtimePublisher, RealtimePublisher
from app.services.errors import ProjectNotFoundError


class ProjectService:
    def __init__(
        self,
        session: AsyncSession,
        projects: ProjectRepository | None = None,
        realtime: RealtimePublisher | None = None,
    ) -> None:
        self.session = session
        self.projects = projects or ProjectRepository(session)
        self.realtime = realtime or NoopRealtimePublisher()

    async def list_projects(self) -> list[Project]:
        return await self.projects.list_all()

    async def get_project(self, project_id: int) -> Project:
        return await self._get_project_or_raise(project_id)

    async def create_project(self, fields: Mapping[str, Any]) -> Project:
        project = await self.projects.create(fields)
        await self.session.commit()
        await self.session.refresh(project)
        await self._emit_projects_changed()
        return project

    async def update_project(
        self,
        project_id: int,
        changes: Mapping[str, Any],
    ) -> Project:
        project = await self._get_project_or_raise(project_id)
        await self.projects.update(project, changes)
        await self.session.commit()
        await self.session.refresh(project)
        await self._emit_projects_changed()
        return project

    async def delete_project(self, project_id: int) -> None:
        project = await self._get_project_or_raise(project_id)
        await self.projects.delete(project)
        await self.session.commit()
        await self._emit_projects_changed()

    async def _get_project_or_raise(self, project_id: int) -> Project:
        project = await self.projects.get_by_id(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    async def _emit_projects_changed(self) -> None:
        # Dashboard counters are derived from the projects table.
        await self.realtime.notify(RealtimeTopic.PROJECTS_UPDATED)
        await self.realtime.notify(RealtimeTopic.STATS_UPDATED)
