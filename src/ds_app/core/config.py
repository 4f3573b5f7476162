# src/ds_app/core/config.py
from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ds_app.core.paths import plain_folder_name


class Settings(BaseSettings):
    """
    App settings (12-factor). Override via env vars, e.g.
      DS_COPY_MODE=true  DS_CREATE_SUBFOLDER=true  DS_SUBFOLDER_NAME=by-day
    """

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Organize defaults (CLI flags override these)
    COPY_MODE: bool = False  # False => move
    CREATE_SUBFOLDER: bool = False
    SUBFOLDER_NAME: str = "organized"

    model_config = SettingsConfigDict(
        env_prefix="DS_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("SUBFOLDER_NAME")
    @classmethod
    def _single_component(cls, name: str) -> str:
        return plain_folder_name(name)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Cached getter so every command sees the same settings instance.
    """
    return Settings()
