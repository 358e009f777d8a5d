"""Dashboard repository - read-only aggregate queries"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Member, Payment, PaymentRecordStatus, TourMember, TourPackage


def _created_between(query, column, start: Optional[datetime], end: Optional[datetime]):
    if start is not None:
        query = query.filter(column >= start)
    if end is not None:
        query = query.filter(column < end)
    return query


class DashboardRepository:
    @staticmethod
    def count_packages(db: Session, start: Optional[datetime] = None, end: Optional[datetime] = None) -> int:
        return _created_between(db.query(TourPackage), TourPackage.created_at, start, end).count()

    @staticmethod
    def count_active_packages(db: Session) -> int:
        return db.query(TourPackage).filter(TourPackage.bookings.any()).count()

    @staticmethod
    def average_package_price(db: Session) -> float:
        return float(db.query(func.avg(TourPackage.tour_price)).scalar() or 0)

    @staticmethod
    def count_members(db: Session, start: Optional[datetime] = None, end: Optional[datetime] = None) -> int:
        return _created_between(db.query(Member), Member.created_at, start, end).count()

    @staticmethod
    def count_bookings(db: Session, start: Optional[datetime] = None, end: Optional[datetime] = None) -> int:
        return _created_between(db.query(TourMember), TourMember.created_at, start, end).count()

    @staticmethod
    def paid_revenue(db: Session, start: Optional[datetime] = None, end: Optional[datetime] = None) -> float:
        query = db.query(func.coalesce(func.sum(Payment.amount), 0)).filter(
            Payment.status == PaymentRecordStatus.PAID.value
        )
        return float(_created_between(query, Payment.payment_date, start, end).scalar() or 0)

    @staticmethod
    def payment_status_counts(db: Session) -> dict[str, int]:
        rows = (
            db.query(TourMember.payment_status, func.count(TourMember.id))
            .group_by(TourMember.payment_status)
            .all()
        )
        return {status: count for status, count in rows}

    @staticmethod
    def outstanding_total_cost(db: Session, statuses: list[str]) -> float:
        total = (
            db.query(func.coalesce(func.sum(TourMember.total_cost), 0))
            .filter(TourMember.payment_status.in_(statuses))
            .scalar()
        )
        return float(total or 0)

    @staticmethod
    def seat_totals(db: Session) -> tuple[int, int]:
        """(Σ package seats, Σ booked member count)"""
        total = db.query(func.coalesce(func.sum(TourPackage.total_seat), 0)).scalar()
        occupied = db.query(func.coalesce(func.sum(TourMember.member_count), 0)).scalar()
        return int(total or 0), int(occupied or 0)

    @staticmethod
    def recent_bookings(db: Session, limit: int) -> list[TourMember]:
        return db.query(TourMember).order_by(TourMember.created_at.desc()).limit(limit).all()

    @staticmethod
    def paid_payments_between(db: Session, start: datetime, end: datetime) -> list[tuple[datetime, float]]:
        """PAID payments dated in ``[start, end)``"""
        return (
            db.query(Payment.payment_date, Payment.amount)
            .filter(
                Payment.status == PaymentRecordStatus.PAID.value,
                Payment.payment_date >= start,
                Payment.payment_date < end,
            )
            .all()
        )

    @staticmethod
    def popular_packages(db: Session, limit: int) -> list[tuple[TourPackage, int, float, int]]:
        """Packages by booking count: (package, bookings, Σ totalCost, Σ memberCount)"""
        booking_count = func.count(TourMember.id)
        return (
            db.query(
                TourPackage,
                booking_count,
                func.coalesce(func.sum(TourMember.total_cost), 0),
                func.coalesce(func.sum(TourMember.member_count), 0),
            )
            .outerjoin(TourMember, TourMember.tour_package_id == TourPackage.id)
            .group_by(TourPackage.id)
            .order_by(booking_count.desc(), TourPackage.created_at.desc())
            .limit(limit)
            .all()
        )
