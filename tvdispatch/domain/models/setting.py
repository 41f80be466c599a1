from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


class SettingType:
    WORKER = "worker"
    TELEGRAM_BOT = "telegram:bot"
    TRADINGVIEW_SCREENSHOT = "tradingview:screenshot"
    TRADINGVIEW_CREDENTIALS = "tradingview:credentials"


@dataclass(slots=True)
class ConfigEntry:
    id: int
    type: str
    data: str
    enabled: bool
    created_at: datetime
    updated_at: datetime
