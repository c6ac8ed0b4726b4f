"""Salon and SalonImage schemas."""

from datetime import datetime, time
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.models.salon_image import SalonImageType


class SalonCreate(BaseModel):
    city_id: int
    name: str = Field(max_length=150)
    owner_name: str | None = Field(default=None, max_length=100)
    email: str | None = Field(default=None, max_length=150)
    phone: str = Field(max_length=20)
    address: str
    services: list[str] = Field(default_factory=list)
    is_active: bool = True
    opening_time: time | None = None
    closing_time: time | None = None
    images: list[str] = Field(default_factory=list)


class SalonUpdate(BaseModel):
    """Editable salon fields. Rating and review count are derived and not accepted."""

    city_id: int | None = None
    name: str | None = Field(default=None, max_length=150)
    owner_name: str | None = Field(default=None, max_length=100)
    email: str | None = Field(default=None, max_length=150)
    phone: str | None = Field(default=None, max_length=20)
    address: str | None = None
    services: list[str] | None = None
    opening_time: time | None = None
    closing_time: time | None = None
    images: list[str] | None = None


class SalonStatusUpdate(BaseModel):
    is_active: bool


class SalonBulkDelete(BaseModel):
    ids: list[int] = Field(min_length=1)


class SalonBulkDeleteResult(BaseModel):
    deleted_count: int


class SalonImageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    salon_id: int
    image_url: str
    is_primary: bool
    type: SalonImageType | str


class SalonResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    city_id: int
    name: str
    owner_name: str | None = None
    email: str | None = None
    phone: str
    address: str
    services: list[str]
    rating: Decimal
    total_reviews: int
    is_active: bool
    opening_time: time | None = None
    closing_time: time | None = None
    images: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
