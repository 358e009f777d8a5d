"""Member router - FastAPI endpoints for members and member documents"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from ...auth import STAFF_ROLES, require_roles
from ...database import get_db
from ...models import User
from ...responses import success_response
from ...shared.schemas import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ...shared.validators import parse_form
from ...uploads import present_files
from .schemas import (
    BulkDeleteMembersRequest,
    MemberCreate,
    MemberDetailResponse,
    MemberDocument,
    MemberResponse,
    MemberUpdate,
)
from .service import MemberService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/members", tags=["Members"])


def get_member_service(db: Session = Depends(get_db)) -> MemberService:
    """Dependency injection for MemberService"""
    return MemberService(db)


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.post("")
async def create_member(
    name: Optional[str] = Form(None),
    mobile_no: Optional[str] = Form(None, alias="mobileNo"),
    address: Optional[str] = Form(None),
    extra: Optional[str] = Form(None),
    document: Optional[list[UploadFile]] = File(None),
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: MemberService = Depends(get_member_service),
):
    """Create a member from a multipart form with optional document files"""
    data = parse_form(MemberCreate, {"name": name, "mobileNo": mobile_no, "address": address, "extra": extra})
    member = await service.create_member(data, present_files(document))
    return success_response("Member created successfully", MemberResponse.model_validate(member), 201)


@router.get("")
async def list_members(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    name: Optional[str] = Query(None),
    mobile_no: Optional[str] = Query(None, alias="mobileNo"),
    userid: Optional[str] = Query(None),
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: MemberService = Depends(get_member_service),
):
    result = service.list_members(page, limit, name, mobile_no, userid)
    return success_response("Members retrieved successfully", result)


@router.get("/stats")
async def get_member_stats(
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: MemberService = Depends(get_member_service),
):
    return success_response("Member statistics retrieved successfully", service.get_stats())


@router.post("/bulk-delete")
async def bulk_delete_members(
    data: BulkDeleteMembersRequest,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: MemberService = Depends(get_member_service),
):
    result = service.bulk_delete(data.member_ids)
    return success_response(f"Successfully deleted {result['deletedCount']} member(s)", result)


@router.get("/user/{userid}")
async def get_members_by_user(
    userid: str,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: MemberService = Depends(get_member_service),
):
    members = service.get_members_by_user(userid)
    return success_response("Members retrieved successfully", [MemberResponse.model_validate(m) for m in members])


@router.get("/{member_id}")
async def get_member(
    member_id: str,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: MemberService = Depends(get_member_service),
):
    member = service.get_member(member_id)
    return success_response("Member retrieved successfully", MemberDetailResponse.model_validate(member))


@router.put("/{member_id}")
async def update_member(
    member_id: str,
    name: Optional[str] = Form(None),
    mobile_no: Optional[str] = Form(None, alias="mobileNo"),
    address: Optional[str] = Form(None),
    extra: Optional[str] = Form(None),
    replace_documents: Optional[bool] = Form(None, alias="replaceDocuments"),
    document: Optional[list[UploadFile]] = File(None),
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: MemberService = Depends(get_member_service),
):
    data = parse_form(
        MemberUpdate,
        {
            "name": name,
            "mobileNo": mobile_no,
            "address": address,
            "extra": extra,
            "replaceDocuments": replace_documents,
        },
    )
    member = await service.update_member(member_id, data, present_files(document))
    return success_response("Member updated successfully", MemberResponse.model_validate(member))


@router.delete("/{member_id}")
async def delete_member(
    member_id: str,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: MemberService = Depends(get_member_service),
):
    service.delete_member(member_id)
    return success_response("Member deleted successfully")


# ============================================================================
# DOCUMENTS
# ============================================================================


@router.get("/{member_id}/documents")
async def list_member_documents(
    member_id: str,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: MemberService = Depends(get_member_service),
):
    member = service.get_member(member_id)
    documents = [MemberDocument.model_validate(doc) for doc in member.document or []]
    return success_response("Documents retrieved successfully", documents)


@router.get("/{member_id}/documents/{filename}")
async def download_member_document(
    member_id: str,
    filename: str,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: MemberService = Depends(get_member_service),
):
    file_path, doc = service.get_document_file(member_id, filename)
    return FileResponse(
        file_path,
        media_type=doc.get("mimetype") or "application/octet-stream",
        filename=doc.get("originalName") or doc["filename"],
    )


@router.delete("/{member_id}/documents/{filename}")
async def delete_member_document(
    member_id: str,
    filename: str,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: MemberService = Depends(get_member_service),
):
    member = service.delete_document(member_id, filename)
    return success_response("Document deleted successfully", MemberResponse.model_validate(member))
