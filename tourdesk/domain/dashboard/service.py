"""Dashboard service - cross-entity statistics for the admin dashboard"""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from ...models import PaymentStatus, utcnow
from .repository import DashboardRepository

logger = logging.getLogger(__name__)


def month_start(moment: datetime, months_back: int = 0) -> datetime:
    """First instant of the month ``months_back`` months before ``moment``"""
    month_index = moment.year * 12 + (moment.month - 1) - months_back
    return datetime(month_index // 12, month_index % 12 + 1, 1)


def calculate_growth(current: float, previous: float) -> int:
    """Percent change; 100 when growing from zero"""
    if previous == 0:
        return 100 if current > 0 else 0
    return round((current - previous) / previous * 100)


class DashboardService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = DashboardRepository()

    def get_overview(self) -> dict:
        now = utcnow()
        this_month = month_start(now)
        last_month = month_start(now, 1)

        total_seats, occupied_seats = self.repo.seat_totals(self.db)
        status_counts = self.repo.payment_status_counts(self.db)

        monthly_packages = self.repo.count_packages(self.db, this_month)
        monthly_members = self.repo.count_members(self.db, this_month)
        monthly_bookings = self.repo.count_bookings(self.db, this_month)
        monthly_revenue = self.repo.paid_revenue(self.db, this_month)

        return {
            "totalPackages": self.repo.count_packages(self.db),
            "activePackages": self.repo.count_active_packages(self.db),
            "avgPackagePrice": round(self.repo.average_package_price(self.db)),
            "totalSeats": total_seats,
            "occupiedSeats": occupied_seats,
            "availableSeats": total_seats - occupied_seats,
            "totalRevenue": self.repo.paid_revenue(self.db),
            "monthlyRevenue": monthly_revenue,
            "pendingPayments": self.repo.outstanding_total_cost(
                self.db, [PaymentStatus.PENDING.value, PaymentStatus.PARTIAL.value]
            ),
            "totalMembers": self.repo.count_members(self.db),
            "totalBookings": self.repo.count_bookings(self.db),
            "monthlyBookings": monthly_bookings,
            "paidBookings": status_counts.get(PaymentStatus.PAID.value, 0),
            "partialBookings": status_counts.get(PaymentStatus.PARTIAL.value, 0),
            "pendingBookings": status_counts.get(PaymentStatus.PENDING.value, 0),
            "failedBookings": status_counts.get(PaymentStatus.FAILED.value, 0),
            "recentGrowth": {
                "packages": calculate_growth(
                    monthly_packages, self.repo.count_packages(self.db, last_month, this_month)
                ),
                # new members this month, not a percentage
                "members": monthly_members,
                "bookings": calculate_growth(
                    monthly_bookings, self.repo.count_bookings(self.db, last_month, this_month)
                ),
                "revenue": calculate_growth(
                    monthly_revenue, self.repo.paid_revenue(self.db, last_month, this_month)
                ),
            },
        }

    def get_recent_bookings(self, limit: int) -> list[dict]:
        bookings = self.repo.recent_bookings(self.db, limit)
        result = []
        for booking in bookings:
            primary = booking.members[0] if booking.members else None
            result.append(
                {
                    "id": booking.id,
                    "packageName": booking.tour_package.package_name if booking.tour_package else None,
                    "memberCount": booking.member_count,
                    "totalCost": booking.total_cost,
                    "paymentStatus": booking.payment_status,
                    "createdAt": booking.created_at,
                    "primaryMember": {"name": primary.name, "mobileNo": primary.mobile_no} if primary else None,
                }
            )
        return result

    def get_revenue_trends(self, months: int) -> list[dict]:
        """PAID revenue per ``YYYY-MM`` for the current and previous ``months - 1`` months"""
        now = utcnow()
        start = month_start(now, months - 1)
        end = month_start(now, -1)
        buckets: dict[str, dict] = {}

        for payment_date, amount in sorted(self.repo.paid_payments_between(self.db, start, end)):
            month = payment_date.strftime("%Y-%m")
            bucket = buckets.setdefault(month, {"month": month, "revenue": 0.0, "transactions": 0})
            bucket["revenue"] += amount
            bucket["transactions"] += 1

        for bucket in buckets.values():
            bucket["revenue"] = round(bucket["revenue"], 2)
        return list(buckets.values())

    def get_popular_packages(self, limit: int) -> list[dict]:
        result = []
        for package, booking_count, total_revenue, total_members in self.repo.popular_packages(self.db, limit):
            result.append(
                {
                    "id": package.id,
                    "packageName": package.package_name,
                    "tourPrice": package.tour_price,
                    "totalSeat": package.total_seat,
                    "bookingCount": booking_count,
                    "totalRevenue": float(total_revenue),
                    "totalMembers": int(total_members),
                    "utilizationRate": round(int(total_members) / package.total_seat * 100)
                    if package.total_seat
                    else 0,
                }
            )
        return result
