"""App settings, read once from the environment (and ``.env``)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

DEFAULT_RENDER_API_URL = "https://api.render.com/v1"
DEFAULT_TIMEZONE = "Europe/London"

REQUIRED_SETTINGS = {
    "webhook_secret": "RENDER_WEBHOOK_SECRET",
    "render_api_key": "RENDER_API_KEY",
    "discord_token": "DISCORD_TOKEN",
    "discord_channel_id": "DISCORD_CHANNEL_ID",
}


class ConfigMissingError(RuntimeError):
    """Raised when a required setting has no value."""

    def __init__(self, missing: list[str]):
        super().__init__(f"Missing env vars: {', '.join(missing)}")
        self.missing = missing


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """App Settings"""

    webhook_secret: str = field(default_factory=lambda: os.getenv("RENDER_WEBHOOK_SECRET", ""))
    render_api_key: str = field(default_factory=lambda: os.getenv("RENDER_API_KEY", ""))
    render_api_url: str = field(
        default_factory=lambda: os.getenv("RENDER_API_URL") or DEFAULT_RENDER_API_URL
    )
    discord_token: str = field(default_factory=lambda: os.getenv("DISCORD_TOKEN", ""))
    discord_channel_id: str = field(default_factory=lambda: os.getenv("DISCORD_CHANNEL_ID", ""))
    timezone: str = field(default_factory=lambda: os.getenv("TIMEZONE", DEFAULT_TIMEZONE))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_json: bool = field(default_factory=lambda: _env_flag("LOG_JSON"))
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))

    def missing(self) -> list[str]:
        """Env var names of required settings that are empty."""
        return [env for attr, env in REQUIRED_SETTINGS.items() if not getattr(self, attr)]

    def require(self) -> None:
        missing = self.missing()
        if missing:
            raise ConfigMissingError(missing)


settings = Settings()
