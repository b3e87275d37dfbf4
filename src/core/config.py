"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking into the CLI.
- Lets adapters (HTTP) and services read the same settings consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "roster-cards"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "roster-cards"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "roster-cards"
    return Path.home() / ".config" / "roster-cards"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str]) -> Path:
    """Write/update variables in the user's global .env."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# roster-cards user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typing + validation at the edge (env vars) without cluttering the core.
    - One configuration contract for the CLI, the fetcher and the services.
    """

    model_config = SettingsConfigDict(
        env_prefix="ROSTER_CARDS_",
        extra="ignore",
        case_sensitive=False,
        # Project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    fake_api_base: str = Field(
        default="https://my-json-server.typicode.com/jacobo1304/sistemas-interactivos-dist/players",
        min_length=8,
        description="Base URL of the roster service; rosters live at `<base>/<user_id>`.",
    )
    jikan_base: str = Field(
        default="https://api.jikan.moe/v4/characters",
        min_length=8,
        description="Base URL of the character detail API; details live at `<base>/<id>`.",
    )

    request_max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum attempts per request (first try included).",
    )
    request_initial_delay: float = Field(
        default=0.5,
        gt=0,
        description="Delay before the first retry (seconds); doubles after every failure.",
    )
    inter_entity_delay: float = Field(
        default=0.5,
        ge=0,
        description="Pause between consecutive character lookups (external rate limit).",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout per request (seconds).",
    )
    user_agent: str = Field(
        default="roster-cards/0.1",
        min_length=1,
        description="User-Agent sent with every request.",
    )

    default_user_id: int = Field(
        default=1,
        ge=1,
        description="User shown when the interactive browser starts.",
    )
    user_count: int = Field(
        default=3,
        ge=1,
        le=1000,
        description="Number of selectable users in the interactive browser.",
    )

    log_level: str = Field(
        default="WARNING",
        description="Root log level (DEBUG, INFO, WARNING, ERROR).",
    )

    @field_validator("fake_api_base", "jikan_base")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        # URL templates add the separator themselves.
        return value.strip().rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value!r}")
        return level

    def roster_url(self, user_id: int) -> str:
        return f"{self.fake_api_base}/{user_id}"

    def entity_url(self, entity_id: int) -> str:
        return f"{self.jikan_base}/{entity_id}"
