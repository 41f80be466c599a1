import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ..domain.models import DEFAULT_PLACEHOLDER_IMAGE_URL, StatusMode


class Settings:
    """Centralised process configuration sourced from environment variables."""

    def __init__(self) -> None:
        load_dotenv()
        self.database_path = Path(os.getenv("DATABASE_PATH", "data/app.db")).resolve()
        self.telegram_api_id = self._get_optional_int("TELEGRAM_API_ID")
        self.telegram_api_hash = os.getenv("TELEGRAM_API_HASH")
        self.poll_interval_seconds = self._get_float("POLL_INTERVAL_SECONDS", default=1.0)
        self.browser_headless = self._get_bool("BROWSER_HEADLESS", default=True)
        self.browser_timeout_ms = self._get_int("BROWSER_TIMEOUT_MS", default=30000)
        self.browser_window_size = os.getenv("BROWSER_WINDOW_SIZE", "1366,768")
        self.placeholder_image_url = os.getenv("PLACEHOLDER_IMAGE_URL", DEFAULT_PLACEHOLDER_IMAGE_URL)
        self.status_mode = os.getenv("STATUS_MODE", StatusMode.LAST).strip().lower()
        if self.status_mode not in StatusMode.ALL:
            raise RuntimeError(f"STATUS_MODE must be one of {', '.join(StatusMode.ALL)}")
        self.heartbeat_stale_seconds = self._get_int("HEARTBEAT_STALE_SECONDS", default=60)
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            self.cors_allow_origins = [item.strip() for item in origins.split(",") if item.strip()]
        else:
            self.cors_allow_origins = ["*"]

    def require_telegram_credentials(self) -> None:
        if self.telegram_api_id is None or not self.telegram_api_hash:
            raise RuntimeError("Missing required environment variables: TELEGRAM_API_ID, TELEGRAM_API_HASH")

    @staticmethod
    def _get_int(key: str, default: Optional[int] = None) -> int:
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise RuntimeError(f"Missing required environment variable: {key}")
            return default
        try:
            return int(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must be an integer") from exc

    @staticmethod
    def _get_optional_int(key: str) -> Optional[int]:
        value = os.getenv(key)
        if not value:
            return None
        try:
            return int(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must be an integer") from exc

    @staticmethod
    def _get_float(key: str, default: float) -> float:
        value = os.getenv(key)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must be a number") from exc

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        value = os.getenv(key)
        if value is None:
            return default
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
        raise RuntimeError(f"Environment variable {key} must be a boolean")
