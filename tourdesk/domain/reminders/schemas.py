"""Payment reminder and SMS schemas"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field, field_validator

from ...shared.schemas import CamelModel


def _to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class BulkSMSRequest(CamelModel):
    """``memberIds`` are booking (tour member) ids"""

    member_ids: list[str] = Field(..., min_length=1)
    message: str = Field(..., min_length=1, max_length=1000)
    schedule_date: Optional[datetime] = None

    @field_validator("message")
    @classmethod
    def check_message(cls, v):
        if not v.strip():
            raise ValueError("Message is required")
        return v

    @field_validator("schedule_date")
    @classmethod
    def normalize_schedule_date(cls, v):
        return _to_naive_utc(v)


class IndividualSMSRequest(CamelModel):
    member_id: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1, max_length=1000)

    @field_validator("message")
    @classmethod
    def check_message(cls, v):
        if not v.strip():
            raise ValueError("Message is required")
        return v


class ReminderFilters(CamelModel):
    search: Optional[str] = None
    tour_package_id: Optional[str] = None
    payment_status: Optional[str] = None
    payment_type: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None

    @field_validator("date_from", "date_to")
    @classmethod
    def normalize_dates(cls, v):
        return _to_naive_utc(v)
