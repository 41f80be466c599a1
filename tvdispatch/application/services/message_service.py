import logging
from typing import List, Optional

from ...domain.models import MessageStatus, QueueMessage
from ...domain.ports.persistence import QueueRepository

logger = logging.getLogger(__name__)


class MessageService:
    """Read access to the dispatch queue plus a way to enqueue new requests."""

    def __init__(self, queue_repository: QueueRepository) -> None:
        self._queue = queue_repository

    def get_recent_messages(self, limit: int, status: Optional[str] = None) -> List[QueueMessage]:
        if status is not None and status not in (
            MessageStatus.PENDING,
            MessageStatus.SUCCESS,
            MessageStatus.FAILED,
        ):
            raise ValueError(f"Unknown status: {status}")
        return self._queue.get_recent_messages(status=status, limit=limit)

    def enqueue(self, data: str, channels: List[str], timeframe: Optional[str] = None) -> QueueMessage:
        clean_data = data.strip()
        if not clean_data:
            raise ValueError("Message data cannot be empty.")
        if not channels:
            raise ValueError("At least one channel is required.")
        message = self._queue.create_message(
            data=clean_data,
            channels=",".join(channels),
            timeframe=timeframe.strip() if timeframe and timeframe.strip() else None,
        )
        logger.info("Queued message %s for %s channel(s)", message.id, len(channels))
        return message
