"""
Payment reminder service.

Renders ``{{key}}`` message templates against a booking, hands the text to
the SMS gateway, and records each reminder on the booking.
"""

import logging
import re
from datetime import timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ... import config
from ...errors import NotFoundError, ValidationFailedError
from ...models import TourMember, utcnow
from ...services.sms_service import SMSGatewayClient
from .repository import ReminderRepository
from .schemas import BulkSMSRequest, IndividualSMSRequest, ReminderFilters

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\{([^}]+)\}\}")


def _format_amount(value: float) -> str:
    return f"{value:.0f}" if float(value).is_integer() else f"{value:.2f}"


def template_context(tour_member: TourMember) -> dict[str, str]:
    """Values available to ``{{key}}`` placeholders"""
    first_member = tour_member.members[0] if tour_member.members else None
    return {
        "totalCost": _format_amount(tour_member.total_cost),
        "memberCount": str(tour_member.member_count),
        "paymentStatus": tour_member.payment_status,
        "paymentType": tour_member.payment_type,
        "packageName": tour_member.tour_package.package_name if tour_member.tour_package else "",
        "name": first_member.name if first_member else "",
        "mobileNo": first_member.mobile_no if first_member else "",
        "totalPaid": _format_amount(tour_member.total_paid),
        "dueAmount": _format_amount(tour_member.due_amount),
        "nextReminder": tour_member.next_reminder.strftime("%Y-%m-%d") if tour_member.next_reminder else "",
    }


def render_message(template: str, context: dict[str, str]) -> str:
    """Replace known ``{{key}}`` placeholders, even with empty values; unknown ones stay as written"""

    def replace(match: re.Match) -> str:
        key = match.group(1).strip()
        if key in context:
            return context[key]
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(replace, template)


def recipient_phone(tour_member: TourMember) -> Optional[str]:
    """Reminders go to the first member on the booking"""
    for member in tour_member.members:
        if member.mobile_no:
            return member.mobile_no
    return None


class ReminderService:
    def __init__(self, db: Session, sms_client: SMSGatewayClient):
        self.db = db
        self.sms_client = sms_client
        self.repo = ReminderRepository()

    def get_payment_reminders(self, filters: ReminderFilters) -> list[TourMember]:
        return self.repo.get_outstanding_bookings(self.db, filters)

    async def send_bulk(self, data: BulkSMSRequest) -> dict:
        """
        Message every found booking and record the reminder.

        Each booking is committed right after its SMS goes out, so a gateway
        failure part-way leaves earlier bookings recorded.
        """
        sent_at = utcnow()
        next_reminder = data.schedule_date or sent_at + timedelta(days=config.REMINDER_INTERVAL_DAYS)

        requested_ids = list(dict.fromkeys(data.member_ids))
        bookings = {b.id: b for b in self.repo.get_bookings_by_ids(self.db, requested_ids)}

        count = 0
        skipped_ids = []
        for tour_member_id in requested_ids:
            tour_member = bookings.get(tour_member_id)
            phone = recipient_phone(tour_member) if tour_member else None
            if not phone:
                logger.warning(f"⚠️ Skipping reminder for {tour_member_id}: booking or phone number missing")
                skipped_ids.append(tour_member_id)
                continue

            message = render_message(data.message, template_context(tour_member))
            await self.sms_client.send(phone, message)
            self.repo.record_reminder(self.db, tour_member_id, sent_at, next_reminder)
            count += 1

        logger.info(f"📨 Bulk reminders sent: {count}, skipped: {len(skipped_ids)}")
        return {"count": count, "skippedIds": skipped_ids}

    async def send_individual(self, data: IndividualSMSRequest) -> dict:
        tour_member = self.repo.get_booking_by_id(self.db, data.member_id)
        if not tour_member:
            raise NotFoundError("Tour member")

        phone = recipient_phone(tour_member)
        if not phone:
            raise ValidationFailedError("No mobile number on file for this booking")

        message = render_message(data.message, template_context(tour_member))
        await self.sms_client.send(phone, message)
        self.repo.record_reminder(self.db, tour_member.id, utcnow())

        logger.info(f"📨 Reminder sent for tour member {tour_member.id}")
        return {"tourMemberId": tour_member.id, "to": phone, "message": message}

    def record_reminder(self, tour_member_id: str) -> None:
        """Count a reminder that was delivered outside the SMS gateway"""
        if not self.repo.record_reminder(self.db, tour_member_id, utcnow()):
            raise NotFoundError("Tour member")
        logger.info(f"🔔 Reminder recorded for tour member {tour_member_id}")
