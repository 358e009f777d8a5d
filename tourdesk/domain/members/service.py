"""Member service - Business logic for members and their documents"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ... import config
from ...errors import ConflictError, NotFoundError, ValidationFailedError
from ...models import Member, User, UserRole, utcnow
from ...security_utils import hash_password_bcrypt
from ...shared.schemas import build_page, paginate
from ...uploads import (
    MEMBER_DOCUMENTS,
    delete_reference_dir,
    delete_stored_files,
    prune_empty_dir,
    resolve_stored_path,
    save_uploads,
)
from .repository import MemberRepository
from .schemas import MemberCreate, MemberResponse, MemberUpdate

logger = logging.getLogger(__name__)

MEMBER_CODE_DIGITS = 5


def next_member_code(last_code: Optional[str], prefix: str = config.MEMBER_ID_PREFIX) -> str:
    """
    Next sequential member id.

    >>> next_member_code(None, "ALMB")
    'ALMB00001'
    >>> next_member_code("ALMB00041", "ALMB")
    'ALMB00042'
    """
    if not last_code:
        return f"{prefix}{1:0{MEMBER_CODE_DIGITS}d}"

    number = int(last_code[len(prefix) :]) + 1
    return f"{prefix}{number:0{MEMBER_CODE_DIGITS}d}"


class MemberService:
    """Service layer for member business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = MemberRepository()

    # ========================================================================
    # CRUD
    # ========================================================================

    async def create_member(self, data: MemberCreate, files: list[UploadFile]) -> Member:
        """
        Create a member together with its MEMBER login account.

        Both rows share the generated id. Documents are written first; if
        anything fails afterwards they are removed again.
        """
        member_id = next_member_code(self.repo.last_member_code(self.db, config.MEMBER_ID_PREFIX))
        documents: list[dict] = []
        try:
            documents = await save_uploads(files, MEMBER_DOCUMENTS, member_id, "document")
            user = User(
                id=member_id,
                name=data.name,
                email=f"{member_id.lower()}@{config.MEMBER_EMAIL_DOMAIN}",
                password_hash=hash_password_bcrypt(config.MEMBER_DEFAULT_PASSWORD),
                role=UserRole.MEMBER.value,
            )
            member = Member(
                id=member_id,
                name=data.name,
                mobile_no=data.mobile_no,
                address=data.address,
                document=documents,
                extra=data.extra or {},
                user_id=member_id,
            )
            self.db.add(user)
            self.db.add(member)
            self.db.commit()
        except IntegrityError as e:
            self._discard_new_member(member_id, documents, e)
            raise ConflictError(f"Member id {member_id} was taken by another request, please try again") from e
        except Exception as e:
            self._discard_new_member(member_id, documents, e)
            raise

        self.db.refresh(member)
        logger.info(f"✅ Member {member_id} created with {len(documents)} document(s)")
        return member

    def _discard_new_member(self, member_id: str, documents: list[dict], error: Exception) -> None:
        """Roll back a failed create and remove only the files it wrote"""
        self.db.rollback()
        delete_stored_files([doc["path"] for doc in documents])
        prune_empty_dir(MEMBER_DOCUMENTS, member_id)
        logger.error(f"❌ Failed to create member {member_id}: {error}")

    def list_members(
        self,
        page: int,
        limit: int,
        name: Optional[str] = None,
        mobile_no: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> dict:
        query = self.repo.search_members(self.db, name, mobile_no, user_id)
        members, total = paginate(query, page, limit)
        return build_page([MemberResponse.model_validate(m) for m in members], total, page, limit)

    def get_stats(self) -> dict:
        month_start = utcnow().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        return {
            "total": self.repo.count_members(self.db),
            "newThisMonth": self.repo.count_members(self.db, created_since=month_start),
            "withBookings": self.repo.count_members_with_bookings(self.db),
        }

    def get_members_by_user(self, user_id: str) -> list[Member]:
        return self.repo.get_members_by_user(self.db, user_id)

    def get_member(self, member_id: str) -> Member:
        member = self.repo.get_member_by_id(self.db, member_id)
        if not member:
            raise NotFoundError("Member")
        return member

    async def update_member(self, member_id: str, data: MemberUpdate, files: list[UploadFile]) -> Member:
        """
        Partial update. New documents are appended unless ``replaceDocuments``
        is set, in which case the previous files are deleted after commit.
        """
        member = self.get_member(member_id)
        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        replace_documents = updates.pop("replace_documents", False)

        if not updates and not files:
            raise ValidationFailedError("No fields to update")

        new_documents = await save_uploads(files, MEMBER_DOCUMENTS, member.id, "document")
        old_documents = list(member.document or [])
        try:
            for key, value in updates.items():
                setattr(member, key, value)
            if new_documents:
                member.document = new_documents if replace_documents else old_documents + new_documents
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            delete_stored_files([doc["path"] for doc in new_documents])
            logger.error(f"❌ Failed to update member {member_id}: {e}")
            raise

        if new_documents and replace_documents:
            delete_stored_files([doc["path"] for doc in old_documents])

        self.db.refresh(member)
        logger.info(f"✏️ Member {member_id} updated: {sorted(updates)} (+{len(new_documents)} document(s))")
        return member

    def delete_member(self, member_id: str) -> None:
        """Delete a member and everything stored on disk for it"""
        member = self.get_member(member_id)
        self.db.delete(member)
        self.db.commit()
        delete_reference_dir(MEMBER_DOCUMENTS, member_id)
        logger.info(f"🗑️ Member {member_id} deleted")

    def bulk_delete(self, member_ids: list[str]) -> dict:
        deleted_count = 0
        failed_ids = []
        for member_id in member_ids:
            try:
                self.delete_member(member_id)
                deleted_count += 1
            except NotFoundError:
                failed_ids.append(member_id)

        logger.info(f"🗑️ Bulk delete: {deleted_count} member(s) deleted, {len(failed_ids)} not found")
        return {"deletedCount": deleted_count, "failedIds": failed_ids}

    # ========================================================================
    # DOCUMENTS
    # ========================================================================

    def _find_document(self, member: Member, filename: str) -> dict:
        for doc in member.document or []:
            if doc.get("filename") == filename:
                return doc
        raise NotFoundError("Document")

    def get_document_file(self, member_id: str, filename: str) -> tuple[Path, dict]:
        member = self.get_member(member_id)
        doc = self._find_document(member, filename)
        return resolve_stored_path(doc["path"], "Document"), doc

    def delete_document(self, member_id: str, filename: str) -> Member:
        member = self.get_member(member_id)
        doc = self._find_document(member, filename)

        member.document = [d for d in member.document if d.get("filename") != filename]
        self.db.commit()
        delete_stored_files([doc["path"]])

        self.db.refresh(member)
        logger.info(f"🗑️ Document {filename} removed from member {member_id}")
        return member
