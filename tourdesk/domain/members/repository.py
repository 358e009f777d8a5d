"""Member repository - Database operations for members"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from ...models import Member, User, tour_member_members


class MemberRepository:
    """Repository for member database operations"""

    @staticmethod
    def get_member_by_id(db: Session, member_id: str) -> Optional[Member]:
        return db.query(Member).filter(Member.id == member_id).first()

    @staticmethod
    def get_members_by_ids(db: Session, member_ids: list[str]) -> list[Member]:
        return db.query(Member).filter(Member.id.in_(member_ids)).all()

    @staticmethod
    def get_members_by_user(db: Session, user_id: str) -> list[Member]:
        return db.query(Member).filter(Member.user_id == user_id).order_by(Member.created_at.desc()).all()

    @staticmethod
    def last_member_code(db: Session, prefix: str) -> Optional[str]:
        """
        Highest id carrying ``prefix`` across members and login users.

        Either row can outlive the other, so both tables are checked.
        """
        codes = [
            db.query(func.max(Member.id)).filter(Member.id.like(f"{prefix}%")).scalar(),
            db.query(func.max(User.id)).filter(User.id.like(f"{prefix}%")).scalar(),
        ]
        codes = [code for code in codes if code]
        return max(codes) if codes else None

    @staticmethod
    def search_members(
        db: Session,
        name: Optional[str] = None,
        mobile_no: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Query:
        query = db.query(Member)

        if name:
            query = query.filter(Member.name.ilike(f"%{name}%"))
        if mobile_no:
            query = query.filter(Member.mobile_no.contains(mobile_no))
        if user_id:
            query = query.filter(Member.user_id == user_id)

        return query.order_by(Member.created_at.desc())

    @staticmethod
    def count_members(db: Session, created_since: Optional[datetime] = None) -> int:
        query = db.query(Member)
        if created_since:
            query = query.filter(Member.created_at >= created_since)
        return query.count()

    @staticmethod
    def count_members_with_bookings(db: Session) -> int:
        return db.query(func.count(func.distinct(tour_member_members.c.member_id))).scalar() or 0
