from datetime import datetime
from typing import Any, Dict, List, Optional

from ...domain.models import ConfigEntry, SettingType
from ...domain.ports.persistence import SettingsRepository
from ...services.heartbeat import heartbeat_age


class SettingService:
    """Administrative access to configuration rows."""

    def __init__(self, settings_repository: SettingsRepository) -> None:
        self._settings = settings_repository

    def list_settings(self) -> List[ConfigEntry]:
        return self._settings.list_settings()

    def create_setting(self, setting_type: str, data: str) -> List[ConfigEntry]:
        # The type vocabulary is deliberately not validated here.
        self._settings.create_setting(setting_type, data)
        return self._settings.list_settings()

    def heartbeat_status(self, stale_after_seconds: int, now: Optional[datetime] = None) -> Dict[str, Any]:
        entry = self._settings.find_setting(SettingType.WORKER)
        age = heartbeat_age(entry, now)
        return {
            "last_seen": entry.data if entry else None,
            "age_seconds": age,
            "stale": age is None or age > stale_after_seconds,
        }
