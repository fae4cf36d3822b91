"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_name: str = "Tutor Reports API"

    # Database (single local key-value table)
    database_url: str = "sqlite+aiosqlite:///./tutor_reports.db"
    sql_echo: bool = False

    # Storage slots
    reports_slot_key: str = "tutor_reports_v1"
    session_slot_key: str = "tutor_user"

    # Identity
    admin_identity: str = "admin"  # exact, case-sensitive match

    # Vision model (LiteLLM-format model string: "provider/model")
    vision_model: str = "gemini/gemini-2.5-flash"
    gemini_api_key: str = ""
    vision_max_tokens: int = 2048
    vision_temperature: float = 0.4

    # Capture device
    capture_device_dir: str = "./capture"
    jpeg_quality: int = 92

    # Export
    export_dir: str = "./exports"
    display_timezone: str = "Asia/Taipei"

    # App
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: str = ""

    def get_cors_origins_list(self) -> List[str]:
        """Get list of configured CORS origins."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
