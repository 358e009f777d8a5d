"""Enquiry service - Business logic for pre-sale leads"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...errors import NotFoundError, ValidationFailedError
from ...models import EnquiryForm, EnquiryStatus, User, UserRole
from ...shared.schemas import build_page, paginate
from .repository import EnquiryRepository
from .schemas import EnquiryCreate, EnquiryResponse, EnquiryUpdate

logger = logging.getLogger(__name__)


class EnquiryService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = EnquiryRepository()

    def create_enquiry(self, data: EnquiryCreate, user: User) -> EnquiryForm:
        enquiry = self.repo.create_enquiry(
            self.db,
            name=data.name,
            phone=data.phone,
            purpose=data.purpose,
            status=data.status.value,
            created_by_id=user.id,
        )
        logger.info(f"📥 Enquiry {enquiry.id} created by {user.email}")
        return enquiry

    def list_enquiries(
        self,
        user: User,
        page: int,
        limit: int,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> dict:
        """Paginated enquiries; staff only see the ones they created"""
        created_by_id = user.id if user.role == UserRole.STAFF.value else None
        query = self.repo.search_enquiries(self.db, status, search, created_by_id)
        enquiries, total = paginate(query, page, limit)
        return build_page([EnquiryResponse.model_validate(e) for e in enquiries], total, page, limit)

    def get_stats(self) -> dict:
        counts = self.repo.count_by_status(self.db)
        return {
            "total": sum(counts.values()),
            "pending": counts.get(EnquiryStatus.PENDING.value, 0),
            "booked": counts.get(EnquiryStatus.BOOKED.value, 0),
            "notInterested": counts.get(EnquiryStatus.NOT_INTERESTED.value, 0),
        }

    def get_enquiry(self, enquiry_id: str) -> EnquiryForm:
        enquiry = self.repo.get_enquiry_by_id(self.db, enquiry_id)
        if not enquiry:
            raise NotFoundError("Enquiry")
        return enquiry

    def update_enquiry(self, enquiry_id: str, data: EnquiryUpdate) -> EnquiryForm:
        enquiry = self.get_enquiry(enquiry_id)
        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        if not updates:
            raise ValidationFailedError("No fields to update")

        if "status" in updates:
            updates["status"] = updates["status"].value

        enquiry = self.repo.update_enquiry(self.db, enquiry, **updates)
        logger.info(f"✏️ Enquiry {enquiry_id} updated: {sorted(updates)}")
        return enquiry

    def update_status(self, enquiry_id: str, status: EnquiryStatus, user: User) -> EnquiryForm:
        """Any status may move to any other; the acting user is recorded"""
        enquiry = self.get_enquiry(enquiry_id)
        enquiry = self.repo.update_enquiry(self.db, enquiry, status=status.value, created_by_id=user.id)
        logger.info(f"🔄 Enquiry {enquiry_id} status -> {status.value} by {user.email}")
        return enquiry

    def delete_enquiry(self, enquiry_id: str) -> None:
        enquiry = self.get_enquiry(enquiry_id)
        self.repo.delete_enquiry(self.db, enquiry)
        logger.info(f"🗑️ Enquiry {enquiry_id} deleted")
