"""Centralized configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import field_validator, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()

DEFAULT_TOAST_DURATION_MS = 86_400_000
DEFAULT_EMPTY_TOAST_DURATION_MS = 4_000


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ==================== Queue Mode ====================
    # Valid: "hold" | "immediate" (anything else falls back to immediate)
    message_queue_mode: str = Field(
        default="immediate", validation_alias="OPENCODE_MESSAGE_QUEUE_MODE"
    )

    # ==================== Toast Durations ====================
    toast_duration_ms: float = Field(
        default=DEFAULT_TOAST_DURATION_MS,
        validation_alias="OPENCODE_MESSAGE_QUEUE_TOAST_DURATION_MS",
    )
    empty_toast_duration_ms: float = Field(
        default=DEFAULT_EMPTY_TOAST_DURATION_MS,
        validation_alias="OPENCODE_MESSAGE_QUEUE_EMPTY_TOAST_DURATION_MS",
    )

    # ==================== Logging ====================
    log_file: str = Field(default="message_queue.log", validation_alias="LOG_FILE")

    @field_validator("message_queue_mode", mode="before")
    @classmethod
    def parse_mode(cls, v):
        if isinstance(v, str) and v.strip().lower() == "hold":
            return "hold"
        return "immediate"

    @field_validator("toast_duration_ms", "empty_toast_duration_ms", mode="before")
    @classmethod
    def parse_duration(cls, v, info):
        defaults = {
            "toast_duration_ms": DEFAULT_TOAST_DURATION_MS,
            "empty_toast_duration_ms": DEFAULT_EMPTY_TOAST_DURATION_MS,
        }
        if v is None or v == "":
            return defaults[info.field_name]
        try:
            parsed = float(v)
        except (TypeError, ValueError):
            return defaults[info.field_name]
        if parsed != parsed or parsed in (float("inf"), float("-inf")):
            return defaults[info.field_name]
        return parsed

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
