"""Tour member router - FastAPI endpoints for bookings and payments"""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import MANAGEMENT_ROLES, STAFF_ROLES, require_roles
from ...database import get_db
from ...models import BOOKING_STATUS_BOOKED, PaymentStatus, PaymentType, User
from ...responses import success_response
from ...shared.schemas import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from .schemas import (
    PaymentCreate,
    PaymentResponse,
    PaymentUpdate,
    TourMemberCreate,
    TourMemberDetailResponse,
    TourMemberFilters,
    TourMemberUpdate,
)
from .service import TourMemberService

logger = logging.getLogger(__name__)

ALL_STATUSES = "ALL"

router = APIRouter(prefix="/tour-members", tags=["Tour Members"])


def get_tour_member_service(db: Session = Depends(get_db)) -> TourMemberService:
    """Dependency injection for TourMemberService"""
    return TourMemberService(db)


# ============================================================================
# BOOKINGS
# ============================================================================


@router.get("")
async def list_tour_members(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    sort_by: Literal["createdAt", "updatedAt", "totalCost", "memberCount"] = Query("createdAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    payment_status: Optional[PaymentStatus] = Query(None, alias="paymentStatus"),
    payment_type: Optional[PaymentType] = Query(None, alias="paymentType"),
    search: Optional[str] = Query(None),
    tour_package_id: Optional[str] = Query(None, alias="tourPackageId"),
    status: str = Query(BOOKING_STATUS_BOOKED),
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: TourMemberService = Depends(get_tour_member_service),
):
    """List bookings (BOOKED by default; ``status=ALL`` or an empty value lists every status)"""
    filters = TourMemberFilters(
        payment_status=payment_status.value if payment_status else None,
        payment_type=payment_type.value if payment_type else None,
        search=search,
        tour_package_id=tour_package_id,
        status=None if status.strip().upper() in ("", ALL_STATUSES) else status,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return success_response("Tour members retrieved successfully", service.list_tour_members(filters, page, limit))


@router.get("/stats")
async def get_tour_member_stats(
    tour_id: Optional[str] = Query(None, alias="tourId"),
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: TourMemberService = Depends(get_tour_member_service),
):
    return success_response("Tour member statistics retrieved successfully", service.get_stats(tour_id))


@router.get("/{tour_member_id}")
async def get_tour_member(
    tour_member_id: str,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: TourMemberService = Depends(get_tour_member_service),
):
    tour_member = service.get_tour_member(tour_member_id)
    return success_response("Tour member retrieved successfully", TourMemberDetailResponse.model_validate(tour_member))


@router.post("")
async def create_tour_member(
    data: TourMemberCreate,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: TourMemberService = Depends(get_tour_member_service),
):
    tour_member = service.create_tour_member(data, current_user)
    return success_response(
        "Tour member created successfully", TourMemberDetailResponse.model_validate(tour_member), 201
    )


@router.put("/{tour_member_id}")
async def update_tour_member(
    tour_member_id: str,
    data: TourMemberUpdate,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: TourMemberService = Depends(get_tour_member_service),
):
    tour_member = service.update_tour_member(tour_member_id, data)
    return success_response("Tour member updated successfully", TourMemberDetailResponse.model_validate(tour_member))


@router.delete("/{tour_member_id}")
async def delete_tour_member(
    tour_member_id: str,
    current_user: User = Depends(require_roles(*MANAGEMENT_ROLES)),
    service: TourMemberService = Depends(get_tour_member_service),
):
    service.delete_tour_member(tour_member_id)
    return success_response("Tour member deleted successfully")


# ============================================================================
# PAYMENTS
# ============================================================================


@router.post("/{tour_member_id}/payments")
async def add_payment(
    tour_member_id: str,
    data: PaymentCreate,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: TourMemberService = Depends(get_tour_member_service),
):
    payment = service.add_payment(tour_member_id, data, current_user)
    return success_response("Payment added successfully", PaymentResponse.model_validate(payment), 201)


@router.get("/{tour_member_id}/payments/{payment_id}")
async def get_payment(
    tour_member_id: str,
    payment_id: str,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: TourMemberService = Depends(get_tour_member_service),
):
    payment = service.get_payment(tour_member_id, payment_id)
    return success_response("Payment retrieved successfully", PaymentResponse.model_validate(payment))


@router.put("/{tour_member_id}/payments/{payment_id}")
async def update_payment(
    tour_member_id: str,
    payment_id: str,
    data: PaymentUpdate,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: TourMemberService = Depends(get_tour_member_service),
):
    payment = service.update_payment(tour_member_id, payment_id, data, current_user)
    return success_response("Payment updated successfully", PaymentResponse.model_validate(payment))


@router.delete("/{tour_member_id}/payments/{payment_id}")
async def delete_payment(
    tour_member_id: str,
    payment_id: str,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: TourMemberService = Depends(get_tour_member_service),
):
    service.delete_payment(tour_member_id, payment_id)
    return success_response("Payment deleted successfully")
