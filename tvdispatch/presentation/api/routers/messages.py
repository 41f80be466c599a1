from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ....application.services.message_service import MessageService
from ....core.dependencies import get_message_service
from ....domain.models import QueueMessage
from ...api.schemas.message import MessageCreate

router = APIRouter(prefix="/api/messages", tags=["Messages"])


@router.get("")
def list_messages(
    limit: int = Query(default=100, ge=1, le=1000),
    status_filter: Optional[str] = Query(default=None, alias="status"),
    message_service: MessageService = Depends(get_message_service),
) -> Dict[str, Any]:
    try:
        items = message_service.get_recent_messages(limit=limit, status=status_filter)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return {"items": [_serialize_message(item) for item in items], "count": len(items)}


@router.post("", status_code=status.HTTP_201_CREATED)
def enqueue_message(
    payload: MessageCreate,
    message_service: MessageService = Depends(get_message_service),
) -> Dict[str, Any]:
    try:
        message = message_service.enqueue(payload.data, payload.channels, payload.timeframe)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _serialize_message(message)


def _serialize_message(message: QueueMessage) -> Dict[str, Any]:
    return {
        "id": message.id,
        "data": message.data,
        "timeframe": message.timeframe,
        "channels": message.channels,
        "status": message.status,
        "log": message.log,
        "created_at": message.created_at.isoformat(),
        "updated_at": message.updated_at.isoformat(),
    }
