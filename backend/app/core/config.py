# app/core/config.py
import os
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).parent.parent.parent

class Settings(BaseSettings):
    app_name: str = "AdminForms"
    env: str = "local"

    # Supabase (blob store)
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    SUPABASE_STORAGE_BUCKET: str = "assets"

    # =========================
    # Persistence API (REST backend owning the records)
    # =========================
    PERSISTENCE_API_BASE_URL: str = "http://localhost:5000"
    PERSISTENCE_API_TOKEN: str | None = None

    # Runtime controls
    HTTP_TIMEOUT_SECONDS: float = 30.0
    UPLOAD_CHUNK_BYTES: int = 64 * 1024

    # Asset rules
    ASSET_MAX_BYTES: int = 5 * 1024 * 1024
    ASSET_MIN_BYTES: int = 1024

    CORS_ALLOW_ORIGINS: str | None = None

    model_config = SettingsConfigDict(
        env_file=os.path.join(PROJECT_ROOT, ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

settings = Settings()
