from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CityCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class CityBulkCreate(BaseModel):
    names: list[str]


class CityBulkResult(BaseModel):
    message: str
    inserted: list[str]


class CityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    is_active: bool
    created_at: datetime | None = None
