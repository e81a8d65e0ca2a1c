from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SiteSettingUpdateRequest(BaseModel):
    value: str = Field(max_length=10000)


class SiteSettingResponse(BaseModel):
    id: int
    key: str
    value: str
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
