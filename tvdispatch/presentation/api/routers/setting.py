from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from ....application.services.setting_service import SettingService
from ....core.dependencies import get_setting_service
from ....domain.models import ConfigEntry
from ...api.schemas.setting import SettingCreate

router = APIRouter(prefix="/api/setting", tags=["Settings"])


@router.get("")
def list_settings(setting_service: SettingService = Depends(get_setting_service)) -> List[Dict[str, Any]]:
    return [serialize_setting(entry) for entry in setting_service.list_settings()]


@router.post("")
def create_setting(
    payload: SettingCreate,
    setting_service: SettingService = Depends(get_setting_service),
) -> List[Dict[str, Any]]:
    entries = setting_service.create_setting(payload.type, payload.data)
    return [serialize_setting(entry) for entry in entries]


def serialize_setting(entry: ConfigEntry) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "type": entry.type,
        "data": entry.data,
        "enabled": entry.enabled,
        "created_at": entry.created_at.isoformat(),
        "updated_at": entry.updated_at.isoformat(),
    }
