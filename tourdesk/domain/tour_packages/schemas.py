"""Tour package schemas"""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import Field, field_validator

from ...shared.schemas import CamelModel
from ...shared.validators import parse_json_object


class TourPackageCreate(CamelModel):
    package_name: str = Field(..., min_length=2, max_length=200)
    tour_price: float = Field(..., gt=0)
    total_seat: int = Field(..., gt=0)
    desc: str = Field(..., min_length=10, max_length=2000)
    extra: Optional[dict[str, Any]] = None

    @field_validator("package_name", "desc")
    @classmethod
    def strip_text(cls, v):
        return v.strip()

    @field_validator("extra", mode="before")
    @classmethod
    def check_extra(cls, v):
        return parse_json_object(v)


class TourPackageUpdate(CamelModel):
    package_name: Optional[str] = Field(None, min_length=2, max_length=200)
    tour_price: Optional[float] = Field(None, gt=0)
    total_seat: Optional[int] = Field(None, gt=0)
    desc: Optional[str] = Field(None, min_length=10, max_length=2000)
    extra: Optional[dict[str, Any]] = None

    @field_validator("extra", mode="before")
    @classmethod
    def check_extra(cls, v):
        return parse_json_object(v)


class TourPackageFilters(CamelModel):
    search: Optional[str] = None
    package_name: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_seats: Optional[int] = None
    max_seats: Optional[int] = None
    sort_by: Literal["packageName", "tourPrice", "totalSeat", "createdAt"] = "createdAt"
    sort_order: Literal["asc", "desc"] = "desc"


class BulkDeletePackagesRequest(CamelModel):
    package_ids: list[str] = Field(..., min_length=1)


class TourPackageResponse(CamelModel):
    id: str
    package_name: str
    tour_price: float
    total_seat: int
    desc: str
    cover_photo: Optional[str] = None
    extra: Optional[dict[str, Any]] = None
    created_by_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
