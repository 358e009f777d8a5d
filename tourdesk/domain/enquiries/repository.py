"""Enquiry repository - Database operations for enquiry forms"""

from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from ...models import EnquiryForm


class EnquiryRepository:
    @staticmethod
    def get_enquiry_by_id(db: Session, enquiry_id: str) -> Optional[EnquiryForm]:
        return db.query(EnquiryForm).filter(EnquiryForm.id == enquiry_id).first()

    @staticmethod
    def search_enquiries(
        db: Session,
        status: Optional[str] = None,
        search: Optional[str] = None,
        created_by_id: Optional[str] = None,
    ) -> Query:
        """Filtered enquiries, newest first"""
        query = db.query(EnquiryForm)

        if created_by_id:
            query = query.filter(EnquiryForm.created_by_id == created_by_id)
        if status:
            query = query.filter(EnquiryForm.status == status)
        if search and search.strip():
            search_term = f"%{search.strip()}%"
            query = query.filter(or_(EnquiryForm.name.ilike(search_term), EnquiryForm.phone.ilike(search_term)))

        return query.order_by(EnquiryForm.created_at.desc())

    @staticmethod
    def count_by_status(db: Session) -> dict[str, int]:
        rows = db.query(EnquiryForm.status, func.count(EnquiryForm.id)).group_by(EnquiryForm.status).all()
        return {status: count for status, count in rows}

    @staticmethod
    def create_enquiry(db: Session, **data) -> EnquiryForm:
        enquiry = EnquiryForm(**data)
        db.add(enquiry)
        db.commit()
        db.refresh(enquiry)
        return enquiry

    @staticmethod
    def update_enquiry(db: Session, enquiry: EnquiryForm, **updates) -> EnquiryForm:
        for key, value in updates.items():
            if hasattr(enquiry, key):
                setattr(enquiry, key, value)

        db.commit()
        db.refresh(enquiry)
        return enquiry

    @staticmethod
    def delete_enquiry(db: Session, enquiry: EnquiryForm) -> None:
        db.delete(enquiry)
        db.commit()
