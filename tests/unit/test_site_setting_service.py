import pytest
from fakes import DummySession, FakeSiteSettingRepository, RecordingPublisher

from app.infra.realtime.events import RealtimeTopic
from app.services.errors import SettingNotFoundError
from app.services.site_setting_service import SiteSettingService


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def service(publisher: RecordingPublisher) -> SiteSettingService:
    return SiteSettingService(
        session=DummySession(),
        settings=FakeSiteSettingRepository(),
        realtime=publisher,
    )


@pytest.mark.asyncio
async def test_set_setting_upserts_and_notifies_settings_only(
    service: SiteSettingService,
    publisher: RecordingPublisher,
) -> None:
    created = await service.set_setting("whatsapp_number", "6281234567890")
    updated = await service.set_setting("whatsapp_number", "6289999999999")

    assert created.id == updated.id
    assert await service.get_public_settings() == {"whatsapp_number": "6289999999999"}
    assert publisher.topics == [
        RealtimeTopic.SETTINGS_UPDATED,
        RealtimeTopic.SETTINGS_UPDATED,
    ]


@pytest.mark.asyncio
async def test_blank_key_is_rejected(
    service: SiteSettingService,
    publisher: RecordingPublisher,
) -> None:
    with pytest.raises(ValueError):
        await service.set_setting("   ", "value")
    assert publisher.topics == []


@pytest.mark.asyncio
async def test_delete_setting(
    service: SiteSettingService,
    publisher: RecordingPublisher,
) -> None:
    await service.set_setting("site_name", "Cipet")
    publisher.topics.clear()

    await service.delete_setting("site_name")

    assert await service.list_settings() == []
    assert publisher.topics == [RealtimeTopic.SETTINGS_UPDATED]

    with pytest.raises(SettingNotFoundError):
        await service.delete_setting("site_name")
    assert publisher.topics == [RealtimeTopic.SETTINGS_UPDATED]
