"""Reminder repository - outstanding bookings and reminder counters"""

from datetime import datetime
from typing import Optional

from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from ...models import Member, PaymentStatus, TourMember, TourPackage
from .schemas import ReminderFilters


class ReminderRepository:
    @staticmethod
    def get_outstanding_bookings(db: Session, filters: ReminderFilters) -> list[TourMember]:
        """
        Bookings that still owe money. An explicit ``payment_status`` filter
        replaces the default "not PAID" condition.
        """
        query = db.query(TourMember)

        if filters.payment_status:
            query = query.filter(TourMember.payment_status == filters.payment_status)
        else:
            query = query.filter(TourMember.payment_status != PaymentStatus.PAID.value)

        if filters.tour_package_id:
            query = query.filter(TourMember.tour_package_id == filters.tour_package_id)
        if filters.payment_type:
            query = query.filter(TourMember.payment_type == filters.payment_type)
        if filters.date_from:
            query = query.filter(TourMember.created_at >= filters.date_from)
        if filters.date_to:
            query = query.filter(TourMember.created_at <= filters.date_to)
        if filters.search and filters.search.strip():
            term = filters.search.strip()
            query = query.filter(
                or_(
                    TourMember.members.any(Member.name.ilike(f"%{term}%")),
                    TourMember.members.any(Member.mobile_no.contains(term)),
                    TourMember.tour_package.has(TourPackage.package_name.ilike(f"%{term}%")),
                )
            )

        return query.order_by(
            TourMember.payment_status.desc(),
            TourMember.total_cost.desc(),
            TourMember.created_at.desc(),
        ).all()

    @staticmethod
    def get_bookings_by_ids(db: Session, tour_member_ids: list[str]) -> list[TourMember]:
        return db.query(TourMember).filter(TourMember.id.in_(tour_member_ids)).all()

    @staticmethod
    def get_booking_by_id(db: Session, tour_member_id: str) -> Optional[TourMember]:
        return db.query(TourMember).filter(TourMember.id == tour_member_id).first()

    @staticmethod
    def record_reminder(
        db: Session,
        tour_member_id: str,
        sent_at: datetime,
        next_reminder: Optional[datetime] = None,
    ) -> int:
        """
        ``reminder_count = reminder_count + 1`` in a single UPDATE.

        Returns:
            Number of rows updated (0 when the booking does not exist)
        """
        values = {
            "reminder_count": TourMember.reminder_count + 1,
            "last_reminder": sent_at,
            "updated_at": sent_at,
        }
        if next_reminder is not None:
            values["next_reminder"] = next_reminder

        result = db.execute(
            update(TourMember)
            .where(TourMember.id == tour_member_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        db.commit()
        return result.rowcount
