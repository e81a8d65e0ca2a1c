from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import hash_password
from app.infra.db.models import AdminUser, SiteSetting

DEFAULT_SITE_SETTINGS: dict[str, str] = {
    "site_name": "Cipet Studio",
    "whatsapp_number": "",
    "instagram_handle": "",
    "order_intake_open": "true",
}


async def seed_default_site_settings(session: AsyncSession) -> None:
    existing_rows = await session.execute(select(SiteSetting.key))
    existing_keys = set(existing_rows.scalars().all())

    inserts = [
        SiteSetting(key=key, value=value)
        for key, value in DEFAULT_SITE_SETTINGS.items()
        if key not in existing_keys
    ]
    if inserts:
        session.add_all(inserts)
        await session.flush()


async def seed_default_admin_account(
    session: AsyncSession,
    username: str,
    password: str | None,
) -> bool:
    if not password:
        return False

    normalized_username = username.strip().lower()
    existing = await session.execute(
        select(AdminUser.id).where(AdminUser.username == normalized_username)
    )
    if existing.scalar_one_or_none() is not None:
        return False

    session.add(
        AdminUser(
            username=normalized_username,
            password_hash=hash_password(password),
        )
    )
    await session.flush()
    return True
