"""Tour member (booking) and payment schemas"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from ...models import BOOKING_STATUS_BOOKED, PaymentRecordStatus, PaymentType
from ...shared.schemas import CamelModel

# ============================================================================
# BOOKINGS
# ============================================================================


class TourMemberCreate(CamelModel):
    member_ids: list[str] = Field(..., min_length=1)
    tour_package_id: str = Field(..., min_length=1)
    package_price: float = Field(..., ge=0)
    member_count: int = Field(..., ge=1)
    net_cost: float = Field(..., ge=0)
    discount: float = Field(0, ge=0)
    total_cost: float = Field(..., ge=0)
    payment_type: PaymentType
    next_reminder: Optional[datetime] = None
    status: str = Field(BOOKING_STATUS_BOOKED, min_length=1, max_length=30)
    extra: Optional[dict[str, Any]] = None


class TourMemberUpdate(CamelModel):
    """Partial booking update. ``payment_status`` only changes through payment reconciliation"""

    member_ids: Optional[list[str]] = Field(None, min_length=1)
    tour_package_id: Optional[str] = None
    package_price: Optional[float] = Field(None, ge=0)
    member_count: Optional[int] = Field(None, ge=1)
    net_cost: Optional[float] = Field(None, ge=0)
    discount: Optional[float] = Field(None, ge=0)
    total_cost: Optional[float] = Field(None, ge=0)
    payment_type: Optional[PaymentType] = None
    next_reminder: Optional[datetime] = None
    last_reminder: Optional[datetime] = None
    status: Optional[str] = Field(None, min_length=1, max_length=30)
    extra: Optional[dict[str, Any]] = None


class TourMemberFilters(CamelModel):
    payment_status: Optional[str] = None
    payment_type: Optional[str] = None
    search: Optional[str] = None
    tour_package_id: Optional[str] = None
    status: Optional[str] = BOOKING_STATUS_BOOKED
    sort_by: str = "createdAt"
    sort_order: str = "desc"


# ============================================================================
# PAYMENTS
# ============================================================================


class PaymentCreate(CamelModel):
    amount: float = Field(..., ge=0.01)
    payment_method: str = Field(..., min_length=1, max_length=50)
    note: Optional[str] = Field(None, max_length=1000)
    status: PaymentRecordStatus = PaymentRecordStatus.PAID
    payment_date: Optional[datetime] = None


class PaymentUpdate(CamelModel):
    amount: Optional[float] = Field(None, ge=0.01)
    payment_method: Optional[str] = Field(None, min_length=1, max_length=50)
    note: Optional[str] = Field(None, max_length=1000)
    status: Optional[PaymentRecordStatus] = None
    payment_date: Optional[datetime] = None


# ============================================================================
# RESPONSES
# ============================================================================


class PaymentResponse(CamelModel):
    id: str
    tour_member_id: str
    amount: float
    payment_method: str
    status: str
    note: Optional[str] = None
    payment_date: datetime
    created_by_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PackageSummary(CamelModel):
    id: str
    package_name: str
    tour_price: float
    total_seat: int
    cover_photo: Optional[str] = None


class MemberSummary(CamelModel):
    id: str
    name: str
    mobile_no: str
    address: str


class TourMemberResponse(CamelModel):
    id: str
    tour_package_id: str
    member_count: int
    package_price: float
    net_cost: float
    discount: float
    total_cost: float
    payment_type: str
    payment_status: str
    reminder_count: int
    last_reminder: Optional[datetime] = None
    next_reminder: Optional[datetime] = None
    status: str
    extra: Optional[dict[str, Any]] = None
    created_by_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    total_paid: float
    due_amount: float
    tour_package: Optional[PackageSummary] = None
    members: list[MemberSummary] = []


class TourMemberDetailResponse(TourMemberResponse):
    payments: list[PaymentResponse] = []
