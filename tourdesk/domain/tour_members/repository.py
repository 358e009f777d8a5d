"""Tour member repository - Database operations for bookings and payments"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from ...models import Member, Payment, PaymentRecordStatus, TourMember, TourPackage
from .schemas import TourMemberFilters

SORT_COLUMNS = {
    "createdAt": TourMember.created_at,
    "updatedAt": TourMember.updated_at,
    "totalCost": TourMember.total_cost,
    "memberCount": TourMember.member_count,
}


class TourMemberRepository:
    """Repository for booking and payment database operations"""

    # ========================================================================
    # BOOKINGS
    # ========================================================================

    @staticmethod
    def get_tour_member_by_id(db: Session, tour_member_id: str) -> Optional[TourMember]:
        return db.query(TourMember).filter(TourMember.id == tour_member_id).first()

    @staticmethod
    def lock_tour_member(db: Session, tour_member_id: str) -> Optional[TourMember]:
        """Fetch a booking with ``SELECT ... FOR UPDATE`` (no-op on SQLite)"""
        return db.query(TourMember).filter(TourMember.id == tour_member_id).with_for_update().first()

    @staticmethod
    def get_members_by_ids(db: Session, member_ids: list[str]) -> list[Member]:
        return db.query(Member).filter(Member.id.in_(member_ids)).all()

    @staticmethod
    def get_package_by_id(db: Session, package_id: str) -> Optional[TourPackage]:
        return db.query(TourPackage).filter(TourPackage.id == package_id).first()

    @staticmethod
    def search_tour_members(db: Session, filters: TourMemberFilters) -> Query:
        query = db.query(TourMember)

        if filters.status:
            query = query.filter(TourMember.status == filters.status)
        if filters.payment_status:
            query = query.filter(TourMember.payment_status == filters.payment_status)
        if filters.payment_type:
            query = query.filter(TourMember.payment_type == filters.payment_type)
        if filters.tour_package_id:
            query = query.filter(TourMember.tour_package_id == filters.tour_package_id)
        if filters.search and filters.search.strip():
            query = query.join(TourMember.tour_package).filter(
                TourPackage.package_name.ilike(f"%{filters.search.strip()}%")
            )

        column = SORT_COLUMNS[filters.sort_by]
        return query.order_by(column.asc() if filters.sort_order == "asc" else column.desc())

    @staticmethod
    def count_bookings(db: Session, status: str, tour_package_id: Optional[str] = None, **filters) -> int:
        query = db.query(TourMember).filter(TourMember.status == status)
        if tour_package_id:
            query = query.filter(TourMember.tour_package_id == tour_package_id)
        for key, value in filters.items():
            query = query.filter(getattr(TourMember, key) == value)
        return query.count()

    @staticmethod
    def sum_paid_revenue(db: Session, status: str, tour_package_id: Optional[str] = None) -> float:
        query = (
            db.query(func.coalesce(func.sum(Payment.amount), 0))
            .join(TourMember, Payment.tour_member_id == TourMember.id)
            .filter(Payment.status == PaymentRecordStatus.PAID.value, TourMember.status == status)
        )
        if tour_package_id:
            query = query.filter(TourMember.tour_package_id == tour_package_id)
        return float(query.scalar() or 0)

    @staticmethod
    def count_packages(db: Session, package_id: Optional[str] = None) -> int:
        query = db.query(TourPackage)
        if package_id:
            query = query.filter(TourPackage.id == package_id)
        return query.count()

    # ========================================================================
    # PAYMENTS
    # ========================================================================

    @staticmethod
    def get_payment(db: Session, tour_member_id: str, payment_id: str) -> Optional[Payment]:
        return (
            db.query(Payment)
            .filter(Payment.id == payment_id, Payment.tour_member_id == tour_member_id)
            .first()
        )

    @staticmethod
    def sum_paid_amount(db: Session, tour_member_id: str) -> float:
        total = (
            db.query(func.coalesce(func.sum(Payment.amount), 0))
            .filter(
                Payment.tour_member_id == tour_member_id,
                Payment.status == PaymentRecordStatus.PAID.value,
            )
            .scalar()
        )
        return float(total or 0)
