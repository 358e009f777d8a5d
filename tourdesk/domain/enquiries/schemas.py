"""Enquiry domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from ...models import EnquiryStatus
from ...shared.schemas import CamelModel
from ...shared.validators import validate_enquiry_phone


class EnquiryCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=100)
    phone: str = Field(..., min_length=1, max_length=30)
    purpose: str = Field(..., min_length=10, max_length=2000)
    status: EnquiryStatus = EnquiryStatus.PENDING

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return validate_enquiry_phone(v)


class EnquiryUpdate(CamelModel):
    """Partial update; fields left out are not touched"""

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    phone: Optional[str] = Field(None, min_length=1, max_length=30)
    purpose: Optional[str] = Field(None, min_length=10, max_length=2000)
    status: Optional[EnquiryStatus] = None

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return validate_enquiry_phone(v)


class EnquiryStatusUpdate(CamelModel):
    status: EnquiryStatus


class EnquiryResponse(CamelModel):
    id: str
    name: str
    phone: str
    purpose: str
    status: str
    created_by_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
