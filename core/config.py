import json
from functools import lru_cache
from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv(dotenv_path=".env.local", override=False)


class Settings(BaseSettings):
    """
    Application-wide configuration settings.
    Loaded from environment variables or the .env.local file.
    """

    # === General ===
    APP_NAME: str = "Storefront Admin ACL API"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["development", "testing", "production"] = "development"
    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 8000
    LOG_LEVEL: str = "info"
    DEBUG: bool = False
    DESCRIPTION: str = (
        "Role and privilege management for the storefront administration."
    )

    # === Database ===
    POSTGRES_DRIVER: str = "asyncpg"
    POSTGRES_SCHEME: str = "postgresql"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "storefront"
    DATABASE_URL_OVERRIDE: Optional[str] = None

    @property
    def DATABASE_URL(self) -> str:
        """Builds the SQLAlchemy-compatible database URL."""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return (
            f"{self.POSTGRES_SCHEME}+{self.POSTGRES_DRIVER}://{self.POSTGRES_USER}:"
            f"{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    # === CORS ===
    ALLOWED_ORIGINS: str = "http://localhost,http://localhost:3000"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        try:
            parsed = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(parsed, list):
                return parsed
        except json.JSONDecodeError:
            pass
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    # === JWT ===
    JWT_SECRET_KEY: str = "change-me-in-production-0123456789abcdef"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_SECONDS: int = 3600
    JWT_VERIFY_TOKEN_EXPIRE_SECONDS: int = 300
    JWT_ISSUER: str = "storefront-api"
    JWT_AUDIENCE: str = "storefront-admin"

    # === ACL ===
    # Granted to every saved role regardless of the selected roles.
    REQUIRED_PRIVILEGES: List[str] = [
        "language:read",
        "locale:read",
        "currency:read",
        "log_entry:create",
        "message_queue_stats:read",
    ]
    SUPERADMIN_USERNAME: str = "admin"
    SUPERADMIN_EMAIL: str = "admin@example.com"
    SUPERADMIN_PASSWORD: str = "shopware"

    # === Meta Configuration for Pydantic ===
    model_config = SettingsConfigDict(
        env_file=".env.local",
        env_file_encoding="utf-8",
        extra="allow",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


# Load settings synchronously for module-level access
settings: Settings = get_settings()
