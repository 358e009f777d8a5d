"""Reminder router - payment reminder listing and SMS endpoints"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import STAFF_ROLES, require_roles
from ...database import get_db
from ...models import PaymentStatus, PaymentType, User
from ...responses import success_response
from ...services.sms_service import SMSGatewayClient, get_sms_client
from ..tour_members.schemas import TourMemberDetailResponse
from .schemas import BulkSMSRequest, IndividualSMSRequest, ReminderFilters
from .service import ReminderService

router = APIRouter(tags=["Payment Reminders"])


def get_reminder_service(
    db: Session = Depends(get_db),
    sms_client: SMSGatewayClient = Depends(get_sms_client),
) -> ReminderService:
    """Dependency injection for ReminderService"""
    return ReminderService(db, sms_client)


@router.get("/tour-members/payment-reminders")
async def get_payment_reminders(
    search: Optional[str] = Query(None),
    tour_package_id: Optional[str] = Query(None, alias="tourPackageId"),
    payment_status: Optional[PaymentStatus] = Query(None, alias="paymentStatus"),
    payment_type: Optional[PaymentType] = Query(None, alias="paymentType"),
    date_from: Optional[datetime] = Query(None, alias="dateFrom"),
    date_to: Optional[datetime] = Query(None, alias="dateTo"),
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: ReminderService = Depends(get_reminder_service),
):
    """Bookings with money outstanding, largest and most urgent first"""
    filters = ReminderFilters(
        search=search,
        tour_package_id=tour_package_id,
        payment_status=payment_status.value if payment_status else None,
        payment_type=payment_type.value if payment_type else None,
        date_from=date_from,
        date_to=date_to,
    )
    bookings = service.get_payment_reminders(filters)
    return success_response(
        "Payment reminders retrieved successfully",
        [TourMemberDetailResponse.model_validate(b) for b in bookings],
    )


@router.patch("/tour-members/{tour_member_id}/reminder")
async def record_reminder(
    tour_member_id: str,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: ReminderService = Depends(get_reminder_service),
):
    service.record_reminder(tour_member_id)
    return success_response("Reminder count updated")


@router.post("/sms/bulk")
async def send_bulk_sms(
    data: BulkSMSRequest,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: ReminderService = Depends(get_reminder_service),
):
    result = await service.send_bulk(data)
    return success_response("Bulk SMS sent successfully", result)


@router.post("/sms/individual")
async def send_individual_sms(
    data: IndividualSMSRequest,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: ReminderService = Depends(get_reminder_service),
):
    result = await service.send_individual(data)
    return success_response("SMS sent successfully", result)
