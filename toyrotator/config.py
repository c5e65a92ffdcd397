"""
Configuration module for ToyRotator backend.
Loads settings from .env file and environment variables.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent.parent / ".env")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Settings:
    """Application configuration loaded from environment variables."""

    def __init__(self):
        self.app_name: str = os.getenv("APP_NAME", "ToyRotator")
        self.api_version: str = os.getenv("API_VERSION", "v1")
        self.debug: bool = _env_bool("DEBUG", "false")
        self.environment: str = os.getenv("ENVIRONMENT", "development")

        # Firebase
        self.firebase_credentials_path: str = os.getenv("FIREBASE_CREDENTIALS_PATH", "")
        # Local dev store; empty keeps data in memory only
        self.local_data_dir: str = os.getenv("LOCAL_DATA_DIR", "")

        # OpenAI
        self.openai_api_key: str = os.getenv("OPENAI_API_KEY", "")
        self.openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        self.openai_vision_model: str = os.getenv("OPENAI_VISION_MODEL", "gpt-4o-mini")
        self.openai_timeout: float = float(os.getenv("OPENAI_TIMEOUT", "30"))

        # CORS
        cors_raw = os.getenv("CORS_ORIGINS", "*")
        self.cors_origins: List[str] = [s.strip() for s in cors_raw.split(",")]

        # Uploads
        self.max_image_bytes: int = int(os.getenv("MAX_IMAGE_BYTES", str(8 * 1024 * 1024)))

        # Rotations & accounts
        self.default_rotation_days: int = int(os.getenv("DEFAULT_ROTATION_DAYS", "7"))
        self.default_display_count: int = int(os.getenv("DEFAULT_DISPLAY_COUNT", "10"))
        self.account_deletion_grace_days: int = int(os.getenv("ACCOUNT_DELETION_GRACE_DAYS", "30"))

        # AI quotas
        self.ai_rotation_daily_limit_trial: int = int(os.getenv("AI_ROTATION_DAILY_LIMIT_TRIAL", "1"))
        self.ai_rotation_daily_limit_paid: int = int(os.getenv("AI_ROTATION_DAILY_LIMIT_PAID", "1"))
        self.ai_recognition_monthly_limit_trial: int = int(os.getenv("AI_RECOGNITION_MONTHLY_LIMIT_TRIAL", "10"))
        self.ai_recognition_monthly_limit_paid: int = int(os.getenv("AI_RECOGNITION_MONTHLY_LIMIT_PAID", "100"))
        self.ai_space_monthly_limit_trial: int = int(os.getenv("AI_SPACE_MONTHLY_LIMIT_TRIAL", "3"))
        self.ai_space_monthly_limit_paid: int = int(os.getenv("AI_SPACE_MONTHLY_LIMIT_PAID", "20"))


_settings = None


def get_settings() -> Settings:
    """Get application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
