"""Member domain schemas"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field, field_validator

from ...shared.schemas import CamelModel
from ...shared.validators import parse_json_object, validate_mobile_no


class MemberCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=100)
    mobile_no: str
    address: str = Field(..., min_length=1, max_length=500)
    extra: Optional[dict[str, Any]] = None

    @field_validator("mobile_no")
    @classmethod
    def check_mobile(cls, v):
        return validate_mobile_no(v)

    @field_validator("extra", mode="before")
    @classmethod
    def check_extra(cls, v):
        return parse_json_object(v)


class MemberUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    mobile_no: Optional[str] = None
    address: Optional[str] = Field(None, min_length=5, max_length=500)
    extra: Optional[dict[str, Any]] = None
    replace_documents: bool = False

    @field_validator("mobile_no")
    @classmethod
    def check_mobile(cls, v):
        return validate_mobile_no(v)

    @field_validator("extra", mode="before")
    @classmethod
    def check_extra(cls, v):
        return parse_json_object(v)


class BulkDeleteMembersRequest(CamelModel):
    member_ids: list[str] = Field(..., min_length=1)


class MemberDocument(CamelModel):
    filename: str
    original_name: Optional[str] = None
    path: str
    mimetype: Optional[str] = None
    size: Optional[int] = None
    uploaded_at: Optional[str] = None


class MemberResponse(CamelModel):
    id: str
    name: str
    mobile_no: str
    address: str
    document: list[MemberDocument] = []
    extra: Optional[dict[str, Any]] = None
    user_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class MemberBookingSummary(CamelModel):
    id: str
    tour_package_id: str
    member_count: int
    total_cost: float
    payment_status: str
    status: str
    created_at: datetime


class MemberDetailResponse(MemberResponse):
    bookings: list[MemberBookingSummary] = []
