"""Application settings using environment variables."""
from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration for the auth backend."""

    model_config = SettingsConfigDict(env_prefix="FLIXAUTH_", env_file=".env", case_sensitive=False, extra="ignore")

    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_NAME: str = "flixauth"
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_CHARSET: str = "utf8mb4"
    DB_SSL: bool = False
    DB_POOL_SIZE: int = Field(10, ge=1)
    DATABASE_URL: Optional[str] = None

    JWT_SECRET_KEY: str = "dev-secret-key-change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 24 * 60

    BCRYPT_ROUNDS: int = Field(10, ge=4, le=31)

    CORS_ORIGINS: List[str] = ["http://localhost:3000"]
    PORT: int = 5000

    def sqlalchemy_url(self) -> str:
        """Build a SQLAlchemy URL for MySQL using pymysql driver, unless overridden."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            f"?charset={self.DB_CHARSET}"
        )


@lru_cache()
def get_settings() -> Settings:
    """Return a cached Settings instance to avoid re-parsing env."""
    return Settings()


settings = get_settings()
