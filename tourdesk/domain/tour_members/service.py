"""Tour member service - Bookings, payments, and payment status reconciliation"""

import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy.orm import Session

from ...errors import NotFoundError, ValidationFailedError
from ...models import (
    BOOKING_STATUS_BOOKED,
    Member,
    Payment,
    PaymentStatus,
    TourMember,
    User,
)
from ...shared.schemas import build_page, paginate
from .repository import TourMemberRepository
from .schemas import (
    PaymentCreate,
    PaymentUpdate,
    TourMemberCreate,
    TourMemberFilters,
    TourMemberResponse,
    TourMemberUpdate,
)

logger = logging.getLogger(__name__)


def derive_payment_status(total_paid: float, total_cost: float) -> str:
    """
    Booking payment status from the sum of its PAID payments.

    >>> derive_payment_status(500, 500)
    'PAID'
    >>> derive_payment_status(200, 500)
    'PARTIAL'
    >>> derive_payment_status(0, 500)
    'PENDING'
    """
    total_paid = round(total_paid, 2)
    if total_paid >= round(total_cost, 2):
        return PaymentStatus.PAID.value
    if total_paid > 0:
        return PaymentStatus.PARTIAL.value
    return PaymentStatus.PENDING.value


class TourMemberService:
    """Service layer for bookings and their payments"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TourMemberRepository()

    @contextmanager
    def _transaction(self):
        """Commit on success, roll back on any error"""
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def _locked_tour_member(self, tour_member_id: str) -> TourMember:
        tour_member = self.repo.lock_tour_member(self.db, tour_member_id)
        if not tour_member:
            raise NotFoundError("Tour member")
        return tour_member

    def _reconcile_payment_status(self, tour_member: TourMember) -> str:
        """Recompute ``payment_status`` inside the caller's transaction"""
        self.db.flush()
        total_paid = self.repo.sum_paid_amount(self.db, tour_member.id)
        status = derive_payment_status(total_paid, tour_member.total_cost)
        if status != tour_member.payment_status:
            logger.info(f"💳 Tour member {tour_member.id} payment status {tour_member.payment_status} -> {status}")
            tour_member.payment_status = status
        return status

    def _validate_members(self, member_ids: list[str]) -> list[Member]:
        unique_ids = list(dict.fromkeys(member_ids))
        members = self.repo.get_members_by_ids(self.db, unique_ids)
        if len(members) != len(unique_ids):
            found = {m.id for m in members}
            logger.warning(f"⚠️ Unknown member ids: {[i for i in unique_ids if i not in found]}")
            raise NotFoundError("Member", "Some members not found")
        return members

    def _validate_package(self, package_id: str) -> None:
        if not self.repo.get_package_by_id(self.db, package_id):
            raise NotFoundError("Tour package")

    # ========================================================================
    # BOOKINGS
    # ========================================================================

    def list_tour_members(self, filters: TourMemberFilters, page: int, limit: int) -> dict:
        query = self.repo.search_tour_members(self.db, filters)
        tour_members, total = paginate(query, page, limit)
        return build_page([TourMemberResponse.model_validate(tm) for tm in tour_members], total, page, limit)

    def get_tour_member(self, tour_member_id: str) -> TourMember:
        tour_member = self.repo.get_tour_member_by_id(self.db, tour_member_id)
        if not tour_member:
            raise NotFoundError("Tour member")
        return tour_member

    def create_tour_member(self, data: TourMemberCreate, user: User) -> TourMember:
        """Create a booking; nothing is written unless every member and the package exist"""
        members = self._validate_members(data.member_ids)
        self._validate_package(data.tour_package_id)

        with self._transaction():
            tour_member = TourMember(
                tour_package_id=data.tour_package_id,
                member_count=data.member_count,
                package_price=data.package_price,
                net_cost=data.net_cost,
                discount=data.discount,
                total_cost=data.total_cost,
                payment_type=data.payment_type.value,
                payment_status=PaymentStatus.PENDING.value,
                next_reminder=data.next_reminder,
                status=data.status,
                extra=data.extra,
                created_by_id=user.id,
            )
            tour_member.members = members
            self.db.add(tour_member)

        self.db.refresh(tour_member)
        logger.info(f"✅ Tour member {tour_member.id} booked for package {data.tour_package_id} by {user.email}")
        return tour_member

    def update_tour_member(self, tour_member_id: str, data: TourMemberUpdate) -> TourMember:
        """
        Partial update. ``memberIds`` replaces the member list; a new
        ``totalCost`` re-derives the payment status in the same transaction.
        """
        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        if not updates:
            raise ValidationFailedError("No fields to update")

        member_ids = updates.pop("member_ids", None)
        members = self._validate_members(member_ids) if member_ids else None
        if "tour_package_id" in updates:
            self._validate_package(updates["tour_package_id"])
        if "payment_type" in updates:
            updates["payment_type"] = updates["payment_type"].value

        with self._transaction():
            tour_member = self._locked_tour_member(tour_member_id)
            for key, value in updates.items():
                setattr(tour_member, key, value)
            if members is not None:
                tour_member.members = members
            if "total_cost" in updates:
                self._reconcile_payment_status(tour_member)

        self.db.refresh(tour_member)
        logger.info(f"✏️ Tour member {tour_member_id} updated: {sorted(updates)}")
        return tour_member

    def delete_tour_member(self, tour_member_id: str) -> None:
        """Delete a booking; its payments go with it"""
        tour_member = self.get_tour_member(tour_member_id)
        with self._transaction():
            self.db.delete(tour_member)
        logger.info(f"🗑️ Tour member {tour_member_id} deleted")

    def get_stats(self, tour_id: Optional[str] = None) -> dict:
        """Counts over BOOKED bookings, optionally for one package"""
        status = BOOKING_STATUS_BOOKED
        return {
            "tourId": tour_id,
            "totalBookings": self.repo.count_bookings(self.db, status, tour_id),
            "pendingPayments": self.repo.count_bookings(
                self.db, status, tour_id, payment_status=PaymentStatus.PENDING.value
            ),
            "partialPayments": self.repo.count_bookings(
                self.db, status, tour_id, payment_status=PaymentStatus.PARTIAL.value
            ),
            "paidBookings": self.repo.count_bookings(self.db, status, tour_id, payment_status=PaymentStatus.PAID.value),
            "totalRevenue": self.repo.sum_paid_revenue(self.db, status, tour_id),
            "totalActiveTours": self.repo.count_packages(self.db, tour_id),
        }

    # ========================================================================
    # PAYMENTS
    # ========================================================================

    def get_payment(self, tour_member_id: str, payment_id: str) -> Payment:
        payment = self.repo.get_payment(self.db, tour_member_id, payment_id)
        if not payment:
            raise NotFoundError("Payment")
        return payment

    def add_payment(self, tour_member_id: str, data: PaymentCreate, user: User) -> Payment:
        with self._transaction():
            tour_member = self._locked_tour_member(tour_member_id)
            payment = Payment(
                tour_member_id=tour_member.id,
                amount=data.amount,
                payment_method=data.payment_method,
                note=data.note,
                status=data.status.value,
                created_by_id=user.id,
            )
            if data.payment_date:
                payment.payment_date = data.payment_date
            self.db.add(payment)
            self._reconcile_payment_status(tour_member)

        self.db.refresh(payment)
        logger.info(f"💰 Payment {payment.id} of {payment.amount} added to tour member {tour_member_id}")
        return payment

    def update_payment(self, tour_member_id: str, payment_id: str, data: PaymentUpdate, user: User) -> Payment:
        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        if not updates:
            raise ValidationFailedError("No fields to update")
        if "status" in updates:
            updates["status"] = updates["status"].value

        with self._transaction():
            tour_member = self._locked_tour_member(tour_member_id)
            payment = self.get_payment(tour_member_id, payment_id)
            for key, value in updates.items():
                setattr(payment, key, value)
            payment.created_by_id = user.id
            self._reconcile_payment_status(tour_member)

        self.db.refresh(payment)
        logger.info(f"✏️ Payment {payment_id} updated: {sorted(updates)}")
        return payment

    def delete_payment(self, tour_member_id: str, payment_id: str) -> None:
        with self._transaction():
            tour_member = self._locked_tour_member(tour_member_id)
            payment = self.get_payment(tour_member_id, payment_id)
            self.db.delete(payment)
            self._reconcile_payment_status(tour_member)

        logger.info(f"🗑️ Payment {payment_id} deleted from tour member {tour_member_id}")
