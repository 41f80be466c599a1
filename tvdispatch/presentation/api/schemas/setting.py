from pydantic import BaseModel, Field


class SettingCreate(BaseModel):
    type: str = Field(..., min_length=1)
    data: str = ""
