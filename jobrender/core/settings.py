from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="JOBRENDER_", case_sensitive=False)

    release_dir: Path = Path(".")
    log_level: str = "INFO"
