import asyncio

import structlog

from app.core.config import get_settings
from app.core.db import close_engine, get_session_factory, init_engine
from app.infra.db.seed import seed_default_admin_account, seed_default_site_settings

logger = structlog.get_logger()


async def main() -> None:
    settings = get_settings()
    engine = init_engine()
    try:
        session_factory = get_session_factory()
        async with session_factory() as session:
            await seed_default_site_settings(session)
            created_admin = await seed_default_admin_account(
                session,
                username=settings.admin_default_username,
                password=settings.admin_default_password,
            )
            await session.commit()
        logger.info("seed.completed", admin_created=created_admin)
    finally:
        await close_engine(engine)


if __name__ == "__main__":
    asyncio.run(main())
