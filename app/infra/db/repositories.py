from collections.abc import Mapping
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.enums import OrderStatus
from app.infra.db.models import AdminUser, Order, Project, SiteSetting


class AdminUserRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, admin_id: int) -> AdminUser | None:
        return await self.session.get(AdminUser, admin_id)

    async def get_by_username(self, username: str) -> AdminUser | None:
        stmt: Select[tuple[AdminUser]] = (
            select(AdminUser).where(AdminUser.username == username).limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(AdminUser.id)))
        return int(result.scalar_one() or 0)

    async def create(
        self,
        username: str,
        password_hash: str,
        email: str | None = None,
    ) -> AdminUser:
        admin = AdminUser(username=username, password_hash=password_hash, email=email)
        self.session.add(admin)
        await self.session.flush()
        await self.session.refresh(admin)
        return admin

    async def update_password(self, admin: AdminUser, password_hash: str) -> None:
        admin.password_hash = password_hash
        await self.session.flush()


class ProjectRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_all(self) -> list[Project]:
        """Featured first, then ascending ``display_order``, then newest first."""
        stmt: Select[tuple[Project]] = select(Project).order_by(
            Project.featured.desc(),
            Project.display_order.asc(),
            Project.created_at.desc(),
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, project_id: int) -> Project | None:
        return await self.session.get(Project, project_id)

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(Project.id)))
        return int(result.scalar_one() or 0)

    async def create(self, fields: Mapping[str, Any]) -> Project:
        project = Project(**fields)
        self.session.add(project)
        await self.session.flush()
        await self.session.refresh(project)
        return project

    async def update(self, project: Project, changes: Mapping[str, Any]) -> None:
        for field_name, value in changes.items():
            setattr(project, field_name, value)
        await self.session.flush()

    async def delete(self, project: Project) -> None:
        await self.session.delete(project)
        await self.session.flush()


class OrderRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_all(self, status_filter: OrderStatus | None = None) -> list[Order]:
        stmt: Select[tuple[Order]] = select(Order)
        if status_filter is not None:
            stmt = stmt.where(Order.status == status_filter)
        stmt = stmt.order_by(Order.created_at.desc(), Order.id.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, order_id: int) -> Order | None:
        return await self.session.get(Order, order_id)

    async def count(self, status: OrderStatus | None = None) -> int:
        stmt: Select[tuple[int]] = select(func.count(Order.id))
        if status is not None:
            stmt = stmt.where(Order.status == status)
        result = await self.session.execute(stmt)
        return int(result.scalar_one() or 0)

    async def create(self, fields: Mapping[str, Any]) -> Order:
        order = Order(status=OrderStatus.PENDING, **fields)
        self.session.add(order)
        await self.session.flush()
        await self.session.refresh(order)
        return order

    async def update(self, order: Order, changes: Mapping[str, Any]) -> None:
        for field_name, value in changes.items():
            setattr(order, field_name, value)
        await self.session.flush()

    async def delete(self, order: Order) -> None:
        await self.session.delete(order)
        await self.session.flush()


class SiteSettingRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_all(self) -> list[SiteSetting]:
        stmt: Select[tuple[SiteSetting]] = select(SiteSetting).order_by(
            SiteSetting.key.asc()
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_key(self, key: str) -> SiteSetting | None:
        stmt: Select[tuple[SiteSetting]] = (
            select(SiteSetting).where(SiteSetting.key == key).limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(self, key: str, value: str) -> SiteSetting:
        setting = await self.get_by_key(key)
        if setting is None:
            setting = SiteSetting(key=key, value=value)
            self.session.add(setting)
        else:
            setting.value = value
        await self.session.flush()
        await self.session.refresh(setting)
        return setting

    async def delete(self, setting: SiteSetting) -> None:
        await self.session.delete(setting)
        await self.session.flush()
