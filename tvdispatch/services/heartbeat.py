from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from ..domain.models import ConfigEntry, SettingType
from ..domain.ports.persistence import SettingsRepository

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HeartbeatRecorder:
    """Keeps the ``worker`` settings row stamped with the last moment of progress."""

    def __init__(self, settings: SettingsRepository, clock: Optional[Clock] = None) -> None:
        self._settings = settings
        self._clock = clock or _utcnow
        self._last: Optional[datetime] = None

    @property
    def last_beat(self) -> Optional[datetime]:
        return self._last

    def init(self) -> ConfigEntry:
        entry = self._settings.find_or_create_setting(SettingType.WORKER, self._next().isoformat())
        logger.info("Worker heartbeat row ready (id=%s, last=%s)", entry.id, entry.data)
        return entry

    def touch(self) -> None:
        updated = self._settings.update_setting_data(SettingType.WORKER, self._next().isoformat())
        if not updated:
            logger.debug("Heartbeat row missing; nothing updated.")

    def _next(self) -> datetime:
        now = self._clock()
        if self._last is not None and now < self._last:
            now = self._last
        self._last = now
        return now


def heartbeat_age(entry: Optional[ConfigEntry], now: Optional[datetime] = None) -> Optional[float]:
    """Seconds since the recorded heartbeat, or ``None`` when it cannot be read."""
    if entry is None or not entry.data:
        return None
    try:
        seen = datetime.fromisoformat(entry.data)
    except ValueError:
        return None
    if seen.tzinfo is None:
        seen = seen.replace(tzinfo=timezone.utc)
    current = now or _utcnow()
    return max((current - seen).total_seconds(), 0.0)
