"""Application configuration using Pydantic Settings."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

ROOT_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Gemini
    GEMINI_API_KEY: str = ""
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/models"
    GEMINI_PRO_MODEL: str = "gemini-3-pro-preview"  # analysis + simulation
    GEMINI_FLASH_MODEL: str = "gemini-3-flash-preview"  # scans, documents, coaching
    GEMINI_LIVE_MODEL: str = "gemini-2.5-flash-native-audio-preview-12-2025"
    GEMINI_TIMEOUT_SECONDS: float = 120.0
    GEMINI_THINKING_BUDGET: int = 32768

    # Local storage
    DATA_DIR: Path = ROOT_DIR / "data"
    # Uploaded-document insights are session-only unless enabled
    PERSIST_KNOWLEDGE_BASE: bool = False

    # Simulation room
    CLOCK_TICK_SECONDS: float = 0.1
    CLOCK_SETTLE_SECONDS: float = 2.0
    FLAVOR_EVENT_PROBABILITY: float = 0.04
    AUDIO_SAMPLE_RATE: int = 24000

    DEFAULT_LANGUAGE: str = "en"
    LOG_LEVEL: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
