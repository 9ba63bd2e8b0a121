"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "label-history"
    debug: bool = False
    log_level: str = "INFO"

    # Where snapshot .jsonl files live when no --path is given
    data_path: Path = Path.home() / ".local" / "share" / "label-history"

    # Query API: window for /api/shifts when no dates are supplied
    default_moves_days: int = 14

    model_config = {"env_prefix": "LABEL_HISTORY_"}


settings = Settings()
