from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SESSION_SECRET = "local-dev-admin-session-secret-change-me"


class Settings(BaseSettings):
    app_env: str = "local"
    api_port: int = 8000

    postgres_host: str = "127.0.0.1"
    postgres_port: int = 5432
    postgres_db: str = "portfolio"
    postgres_user: str = "portfolio_user"
    postgres_password: str = "portfolio_password"
    database_url_override: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL_OVERRIDE", "DATABASE_URL"),
    )
    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_pool_timeout: int = 30
    db_auto_create: bool = False
    db_seed_defaults: bool = True

    admin_session_secret: str = DEFAULT_SESSION_SECRET
    admin_session_ttl_minutes: int = 720
    admin_session_cookie_name: str = "admin_session"
    admin_default_username: str = "admin"
    admin_default_password: str | None = None

    realtime_require_auth: bool = True
    realtime_send_timeout_seconds: float = 5.0

    discord_webhook_url: str | None = None
    discord_timeout_seconds: float = 5.0

    order_rate_limit: int = 5
    order_rate_window_seconds: int = 300
    login_rate_limit: int = 10
    login_rate_window_seconds: int = 300
    trusted_proxies_raw: str = ""

    cors_allowed_origins_raw: str = "http://127.0.0.1:5173,http://localhost:5173"
    trusted_hosts_raw: str = "127.0.0.1,localhost,testserver"
    force_https: bool = False

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def cors_allowed_origins(self) -> list[str]:
        return [
            origin.strip()
            for origin in self.cors_allowed_origins_raw.split(",")
            if origin.strip()
        ]

    @property
    def trusted_hosts(self) -> list[str]:
        return [
            host.strip() for host in self.trusted_hosts_raw.split(",") if host.strip()
        ]

    @property
    def trusted_proxies(self) -> frozenset[str]:
        return frozenset(
            proxy.strip()
            for proxy in self.trusted_proxies_raw.split(",")
            if proxy.strip()
        )

    @property
    def secure_cookies(self) -> bool:
        return self.force_https or self.app_env.lower() == "production"

    def validate_security_settings(self) -> None:
        if self.app_env.lower() != "production":
            return

        if self.admin_session_secret == DEFAULT_SESSION_SECRET:
            raise ValueError(
                "ADMIN_SESSION_SECRET must be overridden in production."
            )
        if len(self.admin_session_secret) < 32:
            raise ValueError(
                "ADMIN_SESSION_SECRET must be at least 32 characters in production."
            )
        if not self.cors_allowed_origins:
            raise ValueError(
                "CORS_ALLOWED_ORIGINS_RAW must define explicit origins in production."
            )
        if "*" in self.cors_allowed_origins:
            raise ValueError("Wildcard CORS origin is not allowed in production.")
        if not self.trusted_hosts:
            raise ValueError(
                "TRUSTED_HOSTS_RAW must define explicit hosts in production."
            )
        if "*" in self.trusted_hosts:
            raise ValueError("Wildcard trusted host is not allowed in production.")


@lru_cache
def get_settings() -> Settings:
    return Settings()
