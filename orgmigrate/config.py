"""
Configuration settings for the organization migration pipeline.

Uses Pydantic Settings to load environment variables for the target database,
logging, the source document location and run behavior. The destructive
clearing phase is only ever enabled when APP_ENV is exactly "development".
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEVELOPMENT = "development"


class Settings(BaseSettings):
    # Database
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("wildlife_volunteering", alias="DB_NAME")
    db_connect_retries: int = Field(3, alias="DB_CONNECT_RETRIES")

    # Application
    app_env: str = Field("production", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Migration
    source_path: str = Field("data/sample_source.json", alias="SOURCE_PATH")
    testimonial_seed: Optional[int] = Field(None, alias="TESTIMONIAL_SEED")
    results_dir: str = Field("results", alias="RESULTS_DIR")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def is_development(self) -> bool:
        return is_development(self.app_env)


def is_development(environment: Optional[str]) -> bool:
    """Only the exact (case-insensitive) "development" value enables clearing."""
    return bool(environment) and environment.strip().lower() == DEVELOPMENT


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["DEVELOPMENT", "Settings", "get_settings", "is_development"]
