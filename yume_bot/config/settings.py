from __future__ import annotations

from typing import Any, Optional
from urllib.parse import urlparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _validate_base_url(name: str, value: str) -> None:
    if not value:
        raise RuntimeError(f"{name} is empty/invalid.")
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https"):
        raise RuntimeError(f"{name} must start with http:// or https://")
    if not parsed.netloc:
        raise RuntimeError(f"{name} must include a host (and optional port).")


def _validate_log_level(value: str) -> None:
    allowed = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
    v = (value or "").strip().upper()
    if v not in allowed:
        raise RuntimeError(f"LOG_LEVEL must be one of: {', '.join(sorted(allowed))}")


def _validate_timeout(value: float) -> None:
    if value <= 0:
        raise RuntimeError("YUME_HTTP_TIMEOUT must be > 0.")
    if value > 120:
        raise RuntimeError("YUME_HTTP_TIMEOUT is too high (max 120s).")


def _validate_snowflake(name: str, value: Optional[int]) -> None:
    # Discord snowflakes are up to ~19 digits; allow None.
    if value is None:
        return
    if value <= 0:
        raise RuntimeError(f"{name} must be a positive integer.")


class Settings(BaseSettings):
    """
    Bot settings.

    - Loaded once from env (and .env when present)
    - Fail fast on invalid configuration via validate_startup()
    - API_KEY stays optional; write commands check has_api_key themselves
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    # -------------------------
    # Core app / logging
    # -------------------------
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # -------------------------
    # Discord bot
    # -------------------------
    discord_token: str = Field(default="", alias="DISCORD_TOKEN")
    discord_client_id: Optional[int] = Field(default=None, alias="DISCORD_CLIENT_ID")
    # Guild-scoped sync gives instant command updates during development.
    discord_guild_id: Optional[int] = Field(default=None, alias="DISCORD_GUILD_ID")
    sync_commands_on_startup: bool = Field(default=True, alias="DISCORD_SYNC_ON_STARTUP")
    presence_text: str = Field(default="🌸 /help for commands", alias="YUME_PRESENCE_TEXT")

    # -------------------------
    # Yume API
    # -------------------------
    api_base_url: str = Field(default="https://api.itai.gg", alias="API_BASE_URL")
    api_key: str = Field(default="", alias="API_KEY")

    # HTTP
    http_timeout_s: float = Field(default=20.0, alias="YUME_HTTP_TIMEOUT")
    http_user_agent: str = Field(default="yume-discord-bot/1.0", alias="YUME_HTTP_USER_AGENT")

    # -------------------------
    # Validators / normalizers
    # -------------------------

    @field_validator("log_level", mode="before")
    @classmethod
    def _norm_log_level(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip().upper()
        return s or "INFO"

    @field_validator("discord_token", "api_key", mode="before")
    @classmethod
    def _norm_secret(cls, v: Any) -> str:
        return ("" if v is None else str(v)).strip()

    @field_validator("api_base_url", mode="before")
    @classmethod
    def _norm_api_base_url(cls, v: Any) -> str:
        return ("" if v is None else str(v)).strip().rstrip("/")

    @field_validator("discord_client_id", "discord_guild_id", mode="before")
    @classmethod
    def _norm_optional_id(cls, v: Any) -> Any:
        if v is None:
            return None
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("http_user_agent", mode="before")
    @classmethod
    def _norm_user_agent(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip()
        return s or "yume-discord-bot/1.0"

    # -------------------------
    # Derived helpers
    # -------------------------

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def validate_startup(self) -> None:
        """
        Strict validation for boot safety.
        """
        # Required secret
        if not self.discord_token:
            raise RuntimeError("DISCORD_TOKEN is not set in environment (.env).")

        _validate_base_url("API_BASE_URL", self.api_base_url)
        _validate_log_level(self.log_level)
        _validate_snowflake("DISCORD_CLIENT_ID", self.discord_client_id)
        _validate_snowflake("DISCORD_GUILD_ID", self.discord_guild_id)
        _validate_timeout(self.http_timeout_s)

        if len(self.http_user_agent) > 256:
            raise RuntimeError("YUME_HTTP_USER_AGENT is too long (max 256 chars).")


settings = Settings()

__all__ = ["Settings", "settings"]
