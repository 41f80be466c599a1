from dataclasses import dataclass

from ..application.services.message_service import MessageService
from ..application.services.setting_service import SettingService
from ..domain.ports.persistence import PersistenceGateway
from .config import Settings


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    persistence: PersistenceGateway
    setting_service: SettingService
    message_service: MessageService
