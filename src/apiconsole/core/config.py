"""Core configuration.

Scope:
- Centralizes environment variables (pydantic-settings) outside the CLI.
- Adapters (HTTP client, resource fetcher) and shells read the same settings.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "apiconsole"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "apiconsole"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "apiconsole"
    return Path.home() / ".config" / "apiconsole"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Application-wide settings.

    Values come from `APICONSOLE_*` environment variables, the project `.env`
    and the user config `.env`, in that order of precedence.
    """

    model_config = SettingsConfigDict(
        env_prefix="APICONSOLE_",
        extra="ignore",
        case_sensitive=False,
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=100.0,
        gt=0,
        description="Timeout per request (seconds) for the shared HTTP client.",
    )
    user_agent: str = Field(
        default="apiconsole/0.1",
        min_length=1,
        description="User-Agent sent with every API call.",
    )
    print_max_chars: int = Field(
        default=1200,
        ge=-1,
        description="Maximum response characters shown in interactive mode (-1 for no limit).",
    )
    download_dir: Path = Field(
        default_factory=Path.home,
        description="Directory where non-text response bodies are saved.",
    )
    log_level: str = Field(
        default="WARNING",
        min_length=1,
        description="Root log level for the console (DEBUG, INFO, WARNING, ...).",
    )
