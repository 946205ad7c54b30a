# docintake/core/config.py
import os
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).parent.parent.parent

class Settings(BaseSettings):
    app_name: str = "DocIntake"
    env: str = "local"

    # =========================
    # Upload limits
    # =========================
    MAX_UPLOAD_BYTES: int = 25 * 1024 * 1024

    # CORS_ALLOW_ORIGINS="http://localhost:3000,https://yourapp.vercel.app"
    CORS_ALLOW_ORIGINS: str | None = None

    # =========================
    # PDF extraction budget
    # =========================
    PDF_TOTAL_BUDGET_SECONDS: float = 15.0
    PDF_MIN_STAGE_SECONDS: float = 1.0   # remaining budget needed to start a strategy

    # Text objects (BT/ET, Tj/TJ)
    PDF_TEXT_OBJECT_TIME_LIMIT_SECONDS: float = 8.0
    PDF_TEXT_OBJECT_MAX_MATCHES: int = 1000
    PDF_TEXT_OBJECT_SUFFICIENT_FRAGMENTS: int = 500

    # Streams
    PDF_STREAM_TIME_LIMIT_SECONDS: float = 5.0
    PDF_STREAM_MAX_STREAMS: int = 100
    PDF_STREAM_MIN_LENGTH: int = 20

    # Raw text scan
    PDF_RAW_TEXT_TIME_LIMIT_SECONDS: float = 4.0
    PDF_RAW_TEXT_MAX_MATCHES: int = 20

    # Character codes (last resort)
    PDF_CHAR_CODE_TIME_LIMIT_SECONDS: float = 3.0
    PDF_CHAR_CODE_MAX_CHARS: int = 5000
    PDF_CHAR_CODE_MAX_BYTES: int = 50000

    # Acceptance
    PDF_MIN_ACCEPT_CHARS: int = 10
    PDF_FLOOR_MIN_CHARS: int = 30
    PDF_FLOOR_MIN_QUALITY: float = 0.1

    model_config = SettingsConfigDict(
        env_file=os.path.join(PROJECT_ROOT, ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

settings = Settings()
