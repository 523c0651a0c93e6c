"""Environment-driven settings."""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Database
    database_url: Optional[str] = None
    pghost: str = "localhost"
    pgport: int = 5432
    pgdatabase: str = "postgres"
    pguser: str = "postgres"
    pgpassword: str = ""
    db_pool_min_size: int = Field(2, ge=1)
    db_pool_max_size: int = Field(10, ge=1)

    # Roles the store's RLS policies are written for; empty disables switching
    db_authenticated_role: str = "authenticated"
    db_anon_role: str = "anon"

    # Auth
    auth_jwt_secret: str = ""
    auth_jwt_audience: Optional[str] = "authenticated"
    auth_jwt_algorithm: str = "HS256"

    # API
    cors_origins: str = "http://localhost:3000"
    log_level: str = "INFO"

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def pool_kwargs(self) -> dict:
        """Keyword arguments for DatabasePool.initialize."""
        return {
            "dsn": self.database_url or None,
            "host": self.pghost,
            "port": self.pgport,
            "database": self.pgdatabase,
            "user": self.pguser,
            "password": self.pgpassword,
            "min_size": self.db_pool_min_size,
            "max_size": self.db_pool_max_size,
        }


@lru_cache
def get_settings() -> Settings:
    return Settings()
