from dataclasses import dataclass
from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.security import (
    create_admin_session_token,
    decode_admin_session_token,
    generate_password,
    hash_password,
    verify_password,
)
from app.infra.db.models import AdminUser
from app.infra.db.repositories import AdminUserRepository
from app.services.errors import (
    AdminAlreadyExistsError,
    AdminAuthenticationError,
    InvalidPasswordChangeError,
)

logger = structlog.get_logger()

MIN_PASSWORD_LENGTH = 6


@dataclass(slots=True)
class AdminLoginResult:
    session_token: str
    expires_at: datetime
    admin: AdminUser


@dataclass(slots=True)
class AdminSetupResult:
    admin: AdminUser
    password: str


class AdminAuthService:
    def __init__(
        self,
        session: AsyncSession,
        users: AdminUserRepository | None = None,
    ) -> None:
        self.session = session
        self.users = users or AdminUserRepository(session)
        self.settings = get_settings()

    async def login(self, username: str, password: str) -> AdminLoginResult:
        normalized_username = username.strip().lower()
        if not normalized_username:
            raise AdminAuthenticationError()

        admin = await self.users.get_by_username(normalized_username)
        if admin is None or not verify_password(password, admin.password_hash):
            logger.info("auth.login_failed", username=normalized_username)
            raise AdminAuthenticationError()

        token, expires_at = create_admin_session_token(
            admin_id=admin.id,
            secret=self.settings.admin_session_secret,
            ttl_minutes=self.settings.admin_session_ttl_minutes,
        )
        logger.info("auth.login_succeeded", admin_id=admin.id)
        return AdminLoginResult(session_token=token, expires_at=expires_at, admin=admin)

    async def authenticate(self, session_token: str | None) -> AdminUser:
        if not session_token:
            raise AdminAuthenticationError("Not authenticated")

        try:
            claims = decode_admin_session_token(
                session_token,
                self.settings.admin_session_secret,
            )
        except ValueError as exc:
            raise AdminAuthenticationError("Invalid or expired admin session") from exc

        admin = await self.users.get_by_id(claims.admin_id)
        if admin is None:
            raise AdminAuthenticationError("Invalid or expired admin session")
        return admin

    async def setup_initial_admin(self) -> AdminSetupResult:
        if await self.users.count() > 0:
            raise AdminAlreadyExistsError()

        password = generate_password()
        admin = await self.users.create(
            username=self.settings.admin_default_username.strip().lower(),
            password_hash=hash_password(password),
        )
        await self.session.commit()
        await self.session.refresh(admin)
        logger.info("auth.initial_admin_created", admin_id=admin.id)
        return AdminSetupResult(admin=admin, password=password)

    async def change_password(
        self,
        admin: AdminUser,
        current_password: str,
        new_password: str,
    ) -> None:
        if not verify_password(current_password, admin.password_hash):
            raise InvalidPasswordChangeError("Current password is incorrect")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise InvalidPasswordChangeError(
                f"New password must be at least {MIN_PASSWORD_LENGTH} characters"
            )

        await self.users.update_password(admin, hash_password(new_password))
        await self.session.commit()
        logger.info("auth.password_changed", admin_id=admin.id)
