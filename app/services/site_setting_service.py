from sqlalchemy.ext.asyncio import AsyncSession

from app.infra.db.models import SiteSetting
from app.infra.db.repositories import SiteSettingRepository
from app.infra.realtime.events import RealtimeTopic
from app.infra.realtime.publisher import NoopRealtimePublisher, RealtimePublisher
from app.services.errors import SettingNotFoundError


class SiteSettingService:
    def __init__(
        self,
        session: AsyncSession,
        settings: SiteSettingRepository | None = None,
        realtime: RealtimePublisher | None = None,
    ) -> None:
        self.session = session
        self.settings = settings or SiteSettingRepository(session)
        self.realtime = realtime or NoopRealtimePublisher()

    async def list_settings(self) -> list[SiteSetting]:
        return await self.settings.list_all()

    async def get_public_settings(self) -> dict[str, str]:
        return {setting.key: setting.value for setting in await self.settings.list_all()}

    async def set_setting(self, key: str, value: str) -> SiteSetting:
        normalized_key = key.strip()
        if not normalized_key:
            raise ValueError("Setting key cannot be empty")

        setting = await self.settings.upsert(normalized_key, value)
        await self.session.commit()
        await self.session.refresh(setting)
        await self.realtime.notify(RealtimeTopic.SETTINGS_UPDATED)
        return setting

    async def delete_setting(self, key: str) -> None:
        setting = await self.settings.get_by_key(key)
        if setting is None:
            raise SettingNotFoundError(key)

        await self.settings.delete(setting)
        await self.session.commit()
        await self.realtime.notify(RealtimeTopic.SETTINGS_UPDATED)
