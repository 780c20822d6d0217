from typing import Annotated, Any, Literal
from zoneinfo import ZoneInfo

from pydantic import BeforeValidator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",")]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file="./.env",
        env_ignore_empty=True,
        extra="ignore",
    )

    BACKEND_CORS_ORIGINS: Annotated[list[str] | str, BeforeValidator(parse_cors)] = []

    ENVIRONMENT: Literal["local", "test", "staging", "production"] = "local"

    # Used to verify identity tokens when no JWKS endpoint is configured
    # (local emulator and test environments)
    SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"

    # External identity provider
    IDENTITY_JWKS_URL: str | None = None
    IDENTITY_ISSUER: str | None = None
    IDENTITY_AUDIENCE: str | None = None

    # Timezone configuration
    TIMEZONE: str = "Asia/Beirut"

    # Database configuration
    SQLITE_FILE_NAME: str = "restaurant_ops.db"
    DATABASE_URL: str | None = None

    # SMS gateway
    SMS_API_BASE_URL: str = "http://best2sms.com/http.php"
    SMS_TIMEOUT_SECONDS: float = 30.0
    SMS_TEST_NUMBER: str = "96171096633"

    REVOKED_USER_MAX_AGE_HOURS: int = 24

    @computed_field  # type: ignore[prop-decorator]
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:  # noqa
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"sqlite:///{self.SQLITE_FILE_NAME}"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def APP_TIMEZONE(self) -> ZoneInfo:  # noqa
        """Get the timezone object for the configured timezone string."""
        return ZoneInfo(self.TIMEZONE)

settings = Settings()  # type: ignore
