"""
Purpose:
- Centralized configuration using pydantic-settings.
- Reads from SNAPCAPTION_* environment variables and an optional .env file.
- Keeps the Gemini endpoint, image bounds and camera knobs tunable without code changes.
"""

from typing import List, Optional
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Pydantic v2 config (env file + ignore unexpected env vars)
    model_config = SettingsConfigDict(
        env_prefix="SNAPCAPTION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API host/port
    host: str = Field(default="0.0.0.0", description="Bind address for FastAPI/Uvicorn")
    port: int = Field(default=8000, description="Port for FastAPI/Uvicorn")
    log_level: str = Field(default="INFO")

    # CORS
    cors_allow_origins: List[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Allowed origins for browser apps"
    )

    # ---- Gemini ----
    # SNAPCAPTION_GEMINI_API_KEY from .env or shell; calls fail per item when absent
    gemini_api_key: Optional[str] = None
    gemini_model: str = Field(default="gemini-2.0-flash")
    gemini_base_url: str = Field(default="https://generativelanguage.googleapis.com/v1beta")
    request_timeout: float = Field(default=60.0, description="Seconds before a Gemini call gives up")

    # ---- Image normalization ----
    image_max_width: int = Field(default=1200)
    image_max_height: int = Field(default=1200)
    image_format: str = Field(default="WEBP")
    image_quality: int = Field(default=80)
    alt_text_max_chars: int = Field(default=125)

    # ---- Camera ----
    camera_user_index: int = Field(default=0)          # front-facing
    camera_environment_index: int = Field(default=1)   # rear-facing
    camera_width: int = Field(default=1280)
    camera_height: int = Field(default=720)
    capture_quality: int = Field(default=90)

    # ---- Durable preferences (theme only) ----
    preferences_file: Path = Field(default=Path("./data/preferences.json"))

settings = Settings()
