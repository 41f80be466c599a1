from __future__ import annotations

from typing import List, Optional, Protocol

from ..models import ConfigEntry, QueueMessage


class SettingsRepository(Protocol):
    """Abstract storage for type-keyed configuration rows."""

    def list_settings(self) -> List[ConfigEntry]:
        ...

    def create_setting(self, setting_type: str, data: str, enabled: bool = True) -> ConfigEntry:
        ...

    def find_setting(self, setting_type: str) -> Optional[ConfigEntry]:
        ...

    def find_or_create_setting(
        self, setting_type: str, data: str, enabled: bool = True
    ) -> ConfigEntry:
        ...

    def update_setting_data(self, setting_type: str, data: str) -> int:
        ...


class QueueRepository(Protocol):
    """Abstract storage for queued notification requests."""

    def create_message(self, data: str, channels: str, timeframe: Optional[str]) -> QueueMessage:
        ...

    def get_message(self, message_id: int) -> Optional[QueueMessage]:
        ...

    def get_messages_by_status(self, status: str) -> List[QueueMessage]:
        ...

    def get_recent_messages(self, status: Optional[str], limit: int) -> List[QueueMessage]:
        ...

    def update_message(
        self,
        message_id: int,
        *,
        status: Optional[str] = None,
        log: Optional[str] = None,
    ) -> None:
        ...


class PersistenceGateway(SettingsRepository, QueueRepository, Protocol):
    """Composite gateway combining every persistence concern used by the app."""

    pass
