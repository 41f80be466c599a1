from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class MessageCreate(BaseModel):
    data: str = Field(..., min_length=1)
    channels: List[str] = Field(..., min_length=1)
    timeframe: Optional[str] = None

    @field_validator("channels", mode="before")
    @classmethod
    def split_channels(cls, value: object) -> object:
        # Accept the stored comma-separated form as well as a list.
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, list):
            return [item.strip() for item in value if isinstance(item, str) and item.strip()]
        return value
