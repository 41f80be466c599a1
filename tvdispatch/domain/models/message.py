from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

DEFAULT_PLACEHOLDER_IMAGE_URL = "https://miro.medium.com/max/978/1*pUEZd8z__1p-7ICIO1NZFA.png"


class MessageStatus:
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class StatusMode:
    """How a multi-channel message settles its row status."""

    LAST = "last"
    AGGREGATE = "aggregate"

    ALL = (LAST, AGGREGATE)


@dataclass(slots=True)
class QueueMessage:
    id: int
    data: str
    timeframe: Optional[str]
    channels: str
    status: str
    log: Optional[str]
    created_at: datetime
    updated_at: datetime

    @property
    def symbol(self) -> str:
        parts = self.data.split(maxsplit=1)
        return parts[0] if parts else ""

    @property
    def caption(self) -> str:
        parts = self.data.split(maxsplit=1)
        return parts[1].strip() if len(parts) > 1 else ""

    def channel_list(self) -> List[str]:
        # Order, duplicates and blanks are kept as stored.
        return self.channels.split(",")
