"""Domain models for the chart dispatcher."""

from .message import DEFAULT_PLACEHOLDER_IMAGE_URL, MessageStatus, QueueMessage, StatusMode
from .setting import ConfigEntry, SettingType

__all__ = [
    "DEFAULT_PLACEHOLDER_IMAGE_URL",
    "ConfigEntry",
    "MessageStatus",
    "QueueMessage",
    "SettingType",
    "StatusMode",
]
