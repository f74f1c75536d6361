import os
from functools import lru_cache


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    APP_VERSION: str = "0.4.0"
    ENGINE_VERSION: str = "v1-keyword-weights"
    SCHEMA_VERSION: str = "v1-analysis"

    # --- CONFIG ---
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./risou.db")

    # --- REMOTE MODEL (optional) ---
    REMOTE_ENABLED = _env_flag("REMOTE_ENABLED")
    REMOTE_API_BASE = os.getenv("REMOTE_API_BASE", "")
    REMOTE_API_KEY = os.getenv("REMOTE_API_KEY", "")
    REMOTE_MODEL = os.getenv("REMOTE_MODEL", "gpt-4o-mini")
    REMOTE_MODE = os.getenv("REMOTE_MODE", "assist")  # assist / full
    REMOTE_TIMEOUT_SECONDS = float(os.getenv("REMOTE_TIMEOUT_SECONDS", "20"))

    # --- SAFETY LIMITS ---
    MAX_TEXT_LENGTH = 4000
    MAX_EXPORT_ROWS = int(os.getenv("MAX_EXPORT_ROWS", "5000"))

    @property
    def remote_configured(self) -> bool:
        return bool(self.REMOTE_ENABLED and self.REMOTE_API_BASE and self.REMOTE_API_KEY)


@lru_cache
def get_settings():
    return Settings()
