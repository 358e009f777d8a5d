"""Tour package repository - Database operations for tour packages"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from ...models import TourMember, TourPackage
from .schemas import TourPackageFilters

SORT_COLUMNS = {
    "packageName": TourPackage.package_name,
    "tourPrice": TourPackage.tour_price,
    "totalSeat": TourPackage.total_seat,
    "createdAt": TourPackage.created_at,
}


class TourPackageRepository:
    @staticmethod
    def get_package_by_id(db: Session, package_id: str) -> Optional[TourPackage]:
        return db.query(TourPackage).filter(TourPackage.id == package_id).first()

    @staticmethod
    def search_packages(db: Session, filters: TourPackageFilters) -> Query:
        query = db.query(TourPackage)

        if filters.search and filters.search.strip():
            query = query.filter(TourPackage.package_name.ilike(f"%{filters.search.strip()}%"))
        if filters.package_name:
            query = query.filter(TourPackage.package_name.ilike(f"%{filters.package_name}%"))
        if filters.min_price is not None:
            query = query.filter(TourPackage.tour_price >= filters.min_price)
        if filters.max_price is not None:
            query = query.filter(TourPackage.tour_price <= filters.max_price)
        if filters.min_seats is not None:
            query = query.filter(TourPackage.total_seat >= filters.min_seats)
        if filters.max_seats is not None:
            query = query.filter(TourPackage.total_seat <= filters.max_seats)

        column = SORT_COLUMNS[filters.sort_by]
        return query.order_by(column.asc() if filters.sort_order == "asc" else column.desc())

    @staticmethod
    def count_bookings(db: Session, package_id: str) -> int:
        return db.query(TourMember).filter(TourMember.tour_package_id == package_id).count()

    @staticmethod
    def package_aggregates(db: Session) -> tuple:
        """(count, Σ seats, avg price, min price, max price)"""
        return db.query(
            func.count(TourPackage.id),
            func.sum(TourPackage.total_seat),
            func.avg(TourPackage.tour_price),
            func.min(TourPackage.tour_price),
            func.max(TourPackage.tour_price),
        ).one()

    @staticmethod
    def count_booked_packages(db: Session) -> int:
        return db.query(func.count(func.distinct(TourMember.tour_package_id))).scalar() or 0

    @staticmethod
    def delete_package(db: Session, package: TourPackage) -> None:
        db.delete(package)
        db.commit()
